"""
Vector input module.

Data model for the eight airfoil coordinate streams, the file loader
that materialises them, and the declared-count consistency check.
"""

from foamcut.vectors.consistency import check_consistency
from foamcut.vectors.model import (
    VECTOR_KEYS,
    Dimension,
    Half,
    InputSet,
    Side,
    Vector,
    VectorKey,
)
from foamcut.vectors.reader import load_input_set, read_vector

__all__ = [
    "VECTOR_KEYS",
    "Dimension",
    "Half",
    "InputSet",
    "Side",
    "Vector",
    "VectorKey",
    "check_consistency",
    "load_input_set",
    "read_vector",
]
