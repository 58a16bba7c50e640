"""Plonkish circuit builder: columns, gates, lookups, layouter and mock prover.

Provides the host primitives a gadget needs: allocate witness and table
columns, register gates and lookups, assign cells inside scoped regions,
enable selectors and constrain cells equal. MockProver runs a Circuit and
checks every constraint directly.
"""

from .circuit import Circuit
from .constraint_system import ConstraintSystem, Gate, Lookup
from .errors import (
    CircuitSizeMismatch,
    ColumnNotInPermutation,
    InstanceError,
    NotEnoughRowsAvailable,
    PlonkError,
    TableError,
    VerificationError,
)
from .expressions import Column, ColumnType, Expression, Selector, TableColumn
from .layouter import AssignedCell, Region, SimpleLayouter, Table
from .mock_prover import (
    ConstraintNotSatisfied,
    LookupNotSatisfied,
    MockProver,
    PermutationNotSatisfied,
    VerifyFailure,
)

__all__ = [
    "CircuitSizeMismatch",
    "AssignedCell",
    "Circuit",
    "Column",
    "ColumnNotInPermutation",
    "ColumnType",
    "ConstraintNotSatisfied",
    "ConstraintSystem",
    "Expression",
    "Gate",
    "InstanceError",
    "Lookup",
    "LookupNotSatisfied",
    "MockProver",
    "NotEnoughRowsAvailable",
    "PermutationNotSatisfied",
    "PlonkError",
    "Region",
    "Selector",
    "SimpleLayouter",
    "Table",
    "TableColumn",
    "TableError",
    "VerificationError",
    "VerifyFailure",
]
