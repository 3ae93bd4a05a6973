"""Vector file loader.

Materialises the eight-key :class:`~foamcut.vectors.model.InputSet` from
plain-text vector files.  Each file holds a positive integer count
followed by that many whitespace-separated floats::

    3
    0.000000 0.012500
    0.025000

Loading runs in two passes over the keys (Side, Half, Dimension order):

1. Open every file and parse its header.  A missing file or a bad header
   on *any* stream aborts before a single sample is parsed.
2. Allocate ``declared_count`` samples per stream and read them,
   multiplying each by the coordinate scalar.

A stream that ends early (or hits a non-numeric token) is kept with the
samples read so far and reported by one warning; loading continues.

File handles are entered into the caller's :class:`contextlib.ExitStack`
and stay open until the caller's scope exits.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

import numpy as np

from foamcut.errors import (
    WARNING_VECTOR_EOF,
    VectorAllocationError,
    VectorHeaderError,
    VectorOpenError,
    warning_message,
)
from foamcut.vectors.model import VECTOR_KEYS, InputSet, Vector, VectorKey

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"^[+-]?[0-9]+$")
_FLOAT_RE = re.compile(
    r"^[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    r"|inf(?:inity)?|nan)$",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@dataclass
class _OpenStream:
    """A vector file whose header has been consumed."""

    key: VectorKey
    tokens: Iterator[str]
    declared_count: int


def _tokens(stream: TextIO) -> Iterator[str]:
    """Yield whitespace-separated tokens lazily, line by line."""
    for line in stream:
        yield from line.split()


def _parse_header(name: str, tokens: Iterator[str]) -> int:
    """Consume and validate the leading count token.

    Raises
    ------
    VectorHeaderError
        If the token is absent, not a plain decimal integer, or not
        positive.
    """
    token = next(tokens, None)
    if token is None or not _INT_RE.match(token):
        raise VectorHeaderError(name)
    count = int(token)
    if count <= 0:
        raise VectorHeaderError(name)
    return count


def _allocate(name: str, count: int) -> np.ndarray:
    try:
        return np.empty(count, dtype=np.float32)
    except (MemoryError, OverflowError, ValueError) as exc:
        raise VectorAllocationError(name) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def read_vector(
    name: str,
    tokens: Iterator[str],
    declared_count: int,
    scalar: float,
) -> Vector:
    """Read and scale up to *declared_count* samples from *tokens*.

    Parameters
    ----------
    name : str
        Source file name, used for the vector and in messages.
    tokens : Iterator[str]
        Token stream positioned after the header.
    declared_count : int
        Number of samples the header promised.
    scalar : float
        Coordinate scalar applied to every sample.

    Returns
    -------
    Vector
        Stream with ``len(samples) <= declared_count``.

    Raises
    ------
    VectorAllocationError
        If storage for *declared_count* samples cannot be allocated.
    """
    samples = _allocate(name, declared_count)

    n_read = 0
    while n_read < declared_count:
        token = next(tokens, None)
        if token is None:
            break
        if not _FLOAT_RE.match(token):
            logger.debug("%s: non-numeric token %r at sample %d",
                         name, token, n_read)
            break
        # Parsed and stored in single precision, scaled in double.
        samples[n_read] = float(np.float32(float(token))) * scalar
        n_read += 1

    if n_read < declared_count:
        logger.warning(warning_message(WARNING_VECTOR_EOF))
        logger.debug("%s: read %d of %d samples",
                     name, n_read, declared_count)
        samples = samples[:n_read]

    return Vector(
        declared_count=declared_count,
        samples=samples,
        source_name=name,
    )


def open_vector(
    directory: Path,
    key: VectorKey,
    stack: ExitStack,
) -> _OpenStream:
    """Open one vector file and parse its header.

    The handle is registered on *stack*.

    Raises
    ------
    VectorOpenError
        If the file cannot be opened.
    VectorHeaderError
        If the header is missing or invalid.
    """
    name = key.filename
    try:
        stream = stack.enter_context(
            open(directory / name, "r", encoding="ascii", errors="replace")
        )
    except OSError as exc:
        raise VectorOpenError(name) from exc

    tokens = _tokens(stream)
    count = _parse_header(name, tokens)
    logger.debug("%s: declares %d samples", name, count)
    return _OpenStream(key=key, tokens=tokens, declared_count=count)


def load_input_set(
    directory: str | Path,
    scalar: float,
    stack: ExitStack,
) -> InputSet:
    """Load all eight vector files from *directory*.

    Parameters
    ----------
    directory : str | Path
        Directory holding ``ROOTUPPERX`` ... ``TIPLOWERY``.
    scalar : float
        Coordinate scalar applied to every sample.
    stack : ExitStack
        Owner of the opened file handles.

    Returns
    -------
    InputSet
        Total eight-key mapping.

    Raises
    ------
    VectorOpenError, VectorHeaderError, VectorAllocationError
        On the first fatal condition, in key order.
    """
    directory = Path(directory)
    streams = [open_vector(directory, key, stack) for key in VECTOR_KEYS]

    vectors = {
        s.key: read_vector(s.key.filename, s.tokens, s.declared_count, scalar)
        for s in streams
    }
    return InputSet(vectors)
