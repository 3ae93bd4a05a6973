"""Vector data model -- the eight coordinate streams of a wing.

A wing is cut from two cross-sections (root and tip), each split into an
upper and a lower half, each half given as separate X and Y streams.
The three axes compose into a fixed eight-key index::

    (Side, Half, Dimension) -> Vector

    ROOTUPPERX  ROOTUPPERY  ROOTLOWERX  ROOTLOWERY
    TIPUPPERX   TIPUPPERY   TIPLOWERX   TIPLOWERY

The root section drives the X/Y carriage and the tip section drives the
U/V carriage.  Key order is Side major, then Half, then Dimension; every
iteration over keys in this package follows it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

import numpy as np


# ---------------------------------------------------------------------------
# Axes of the index
# ---------------------------------------------------------------------------


class Side(Enum):
    """Wing end; root drives X/Y, tip drives U/V."""

    ROOT = "ROOT"
    TIP = "TIP"


class Half(Enum):
    """Airfoil surface, cut as two separate passes."""

    UPPER = "UPPER"
    LOWER = "LOWER"


class Dimension(Enum):
    """Coordinate carried by a stream."""

    X = "X"
    Y = "Y"


@dataclass(frozen=True, slots=True)
class VectorKey:
    """One slot of the eight-key index.

    Parameters
    ----------
    side : Side
    half : Half
    dimension : Dimension
    """

    side: Side
    half: Half
    dimension: Dimension

    @property
    def filename(self) -> str:
        """Input file name, e.g. ``ROOTUPPERX``."""
        return f"{self.side.value}{self.half.value}{self.dimension.value}"

    def __str__(self) -> str:
        return self.filename


VECTOR_KEYS: tuple[VectorKey, ...] = tuple(
    VectorKey(side, half, dimension)
    for side in Side
    for half in Half
    for dimension in Dimension
)
"""All eight keys in Side, Half, Dimension order."""


# ---------------------------------------------------------------------------
# Vector
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Vector:
    """A single scaled coordinate stream.

    Parameters
    ----------
    declared_count : int
        Count from the first token of the file (always > 0).
    samples : np.ndarray
        Scaled samples, ``float32``.  Shorter than ``declared_count``
        when the file ended early.
    source_name : str
        File the stream was read from.
    """

    declared_count: int
    samples: np.ndarray
    source_name: str

    def __post_init__(self) -> None:
        if self.declared_count <= 0:
            raise ValueError(
                f"declared_count must be > 0, got {self.declared_count}"
            )
        if len(self.samples) > self.declared_count:
            raise ValueError(
                f"{self.source_name}: {len(self.samples)} samples exceed "
                f"declared count {self.declared_count}"
            )

    @property
    def truncated(self) -> bool:
        """True when fewer samples were read than declared."""
        return len(self.samples) < self.declared_count

    def __len__(self) -> int:
        return len(self.samples)


# ---------------------------------------------------------------------------
# Input set
# ---------------------------------------------------------------------------


class InputSet(Mapping):
    """Total, read-only mapping of all eight keys to their vectors.

    Parameters
    ----------
    vectors : Mapping[VectorKey, Vector]
        Must contain exactly the eight keys in :data:`VECTOR_KEYS`.

    Raises
    ------
    ValueError
        If any key is missing or unknown.
    """

    def __init__(self, vectors: Mapping[VectorKey, Vector]) -> None:
        missing = [k.filename for k in VECTOR_KEYS if k not in vectors]
        if missing:
            raise ValueError(f"Input set is missing {', '.join(missing)}")
        unknown = [k for k in vectors if k not in VECTOR_KEYS]
        if unknown:
            raise ValueError(f"Unknown vector keys: {unknown}")
        self._vectors = {key: vectors[key] for key in VECTOR_KEYS}

    def __getitem__(self, key: VectorKey) -> Vector:
        return self._vectors[key]

    def __iter__(self) -> Iterator[VectorKey]:
        return iter(self._vectors)

    def __len__(self) -> int:
        return len(self._vectors)

    def get_vector(
        self, side: Side, half: Half, dimension: Dimension,
    ) -> Vector:
        """Look up a vector by its three axes."""
        return self._vectors[VectorKey(side, half, dimension)]

    def declared_counts(self) -> dict[VectorKey, int]:
        """Declared count per key, in key order."""
        return {key: v.declared_count for key, v in self._vectors.items()}
