"""Primitives - Low-level mathematical building blocks."""

from primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    batch_inverse,
    constant_array,
    field_array,
    reduce,
    to_ints,
)

__all__ = [
    "FF",
    "GOLDILOCKS_PRIME",
    "batch_inverse",
    "constant_array",
    "field_array",
    "reduce",
    "to_ints",
]
