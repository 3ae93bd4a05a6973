"""Declared-count consistency check across the eight vectors."""

from __future__ import annotations

import logging

from foamcut.errors import WARNING_VECTOR_CONSISTENCY, warning_message
from foamcut.vectors.model import Dimension, Half, InputSet, Side, VectorKey

logger = logging.getLogger(__name__)

REFERENCE_KEY = VectorKey(Side.TIP, Half.LOWER, Dimension.Y)


def check_consistency(input_set: InputSet) -> bool:
    """Check that every vector declares the same number of samples.

    All eight counts are compared against the ``TIPLOWERY`` count.  A
    mismatch is logged as a single warning and never raises; the emitter
    still runs using the ``TIP*X`` counts as loop bounds.

    Returns
    -------
    bool
        ``True`` when all counts agree.
    """
    counts = input_set.declared_counts()
    reference = counts[REFERENCE_KEY]

    mismatched = {
        key.filename: count
        for key, count in counts.items()
        if count != reference
    }
    if not mismatched:
        return True

    logger.warning(warning_message(WARNING_VECTOR_CONSISTENCY))
    logger.debug(
        "Declared counts differ from %s=%d: %s",
        REFERENCE_KEY.filename,
        reference,
        ", ".join(f"{name}={count}" for name, count in mismatched.items()),
    )
    return False
