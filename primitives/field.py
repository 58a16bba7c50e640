"""Goldilocks prime field GF(p).

Uses galois library for all vectorised field arithmetic. FF is the field type;
cell values handed around by the circuit builder are plain Python ints already
reduced mod p, and are only lifted to FF arrays when whole columns are
evaluated.
"""

from typing import Iterable, List

import galois
import numpy as np

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Base field GF(p) - Goldilocks prime field."""


# --- Int <-> Field Conversion ---

def reduce(value: int) -> int:
    """Reduce an integer (possibly negative) into [0, p)."""
    return value % GOLDILOCKS_PRIME


def field_array(values: Iterable[int]) -> FF:
    """Lift a sequence of ints into an FF array, reducing each mod p."""
    return FF(np.array([reduce(int(v)) for v in values], dtype=np.uint64))


def constant_array(value: int, n: int) -> FF:
    """FF array of length n filled with a single (possibly negative) value."""
    return FF(np.full(n, reduce(value), dtype=np.uint64))


def to_ints(arr: FF) -> List[int]:
    """Lower an FF array back to a list of Python ints."""
    return [int(x) for x in arr]


# --- Montgomery Batch Inversion ---

def batch_inverse(values):
    """Montgomery batch inversion for any galois array.

    Converts N field inversions into 3N-3 multiplications + 1 inversion.

    Algorithm:
    1. Forward pass: Compute prefix products cumprods[i] = a[0] * a[1] * ... * a[i]
    2. Single inversion: inv_total = cumprods[N-1]^(-1)
    3. Backward pass: Extract individual inverses using cumprods

    Args:
        values: Galois FieldArray to invert (must all be non-zero)

    Returns:
        Galois FieldArray where result[i] = values[i]^(-1)

    Raises:
        ZeroDivisionError: If any element is zero
    """
    n = len(values)
    if n == 0:
        return values
    if n == 1:
        return values ** -1

    field_type = type(values)

    # Forward pass: prefix products
    cumprods = field_type.Zeros(n)
    cumprods[0] = values[0]
    for i in range(1, n):
        cumprods[i] = cumprods[i - 1] * values[i]

    # Single inversion of the total product
    inv_total = cumprods[n - 1] ** -1

    # Backward pass: peel off each inverse
    results = field_type.Zeros(n)
    z = inv_total
    for i in range(n - 1, 0, -1):
        results[i] = z * cumprods[i - 1]
        z = z * values[i]
    results[0] = z

    return results
