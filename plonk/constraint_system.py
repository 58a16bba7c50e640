"""Constraint system: the fixed shape of a circuit.

A ConstraintSystem is filled in once by Circuit.configure(). It records which
columns exist, which of them take part in copy constraints, the custom gates
(polynomials that must vanish on every row) and the lookups (tuples of
expressions that must appear as a row of a static table). Nothing here depends
on a witness.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Set, Tuple, Union

from plonk.expressions import (
    Column,
    ColumnQuery,
    ColumnType,
    Expression,
    Selector,
    SelectorQuery,
    TableColumn,
)

logger = logging.getLogger(__name__)


@dataclass
class Gate:
    """A named set of polynomials, each required to vanish on every row."""
    name: str
    polys: List[Expression]
    poly_names: List[str] = field(default_factory=list)

    def degree(self) -> int:
        return max((p.degree() for p in self.polys), default=0)


@dataclass
class Lookup:
    """Input expressions whose per-row tuple must be a row of the table."""
    name: str
    input_expressions: List[Expression]
    table_columns: List[TableColumn]

    def degree(self) -> int:
        return max((e.degree() for e in self.input_expressions), default=0)


GateConstraints = Sequence[Union[Expression, Tuple[str, Expression]]]


class ConstraintSystem:
    """Columns, gates, lookups and equality settings of a circuit."""

    def __init__(self):
        self.num_advice_columns = 0
        self.num_fixed_columns = 0
        self.num_instance_columns = 0
        self.num_selectors = 0
        self.num_table_columns = 0
        self.selectors: List[Selector] = []
        self.gates: List[Gate] = []
        self.lookups: List[Lookup] = []
        self.equality_columns: Set[Column] = set()
        self.constants: List[Column] = []

    # --- Column allocation ---

    def advice_column(self) -> Column:
        column = Column(self.num_advice_columns, ColumnType.ADVICE)
        self.num_advice_columns += 1
        return column

    def fixed_column(self) -> Column:
        column = Column(self.num_fixed_columns, ColumnType.FIXED)
        self.num_fixed_columns += 1
        return column

    def instance_column(self) -> Column:
        column = Column(self.num_instance_columns, ColumnType.INSTANCE)
        self.num_instance_columns += 1
        return column

    def selector(self) -> Selector:
        """Simple selector; may only multiply gate polynomials."""
        return self._new_selector(complex=False)

    def complex_selector(self) -> Selector:
        """Selector that may also appear inside lookup expressions."""
        return self._new_selector(complex=True)

    def _new_selector(self, complex: bool) -> Selector:
        selector = Selector(self.num_selectors, complex)
        self.num_selectors += 1
        self.selectors.append(selector)
        return selector

    def lookup_table_column(self) -> TableColumn:
        column = TableColumn(self.num_table_columns)
        self.num_table_columns += 1
        return column

    def enable_equality(self, column: Column) -> None:
        self.equality_columns.add(column)

    def enable_constant(self, column: Column) -> None:
        """Use a fixed column to hold constants for assign_advice_from_constant."""
        if column.column_type != ColumnType.FIXED:
            raise ValueError(f"constants column must be fixed, got {column}")
        if column not in self.constants:
            self.constants.append(column)
        self.enable_equality(column)

    # --- Queries ---

    def query_advice(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnType.ADVICE, rotation)

    def query_fixed(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnType.FIXED, rotation)

    def query_instance(self, column: Column, rotation: int = 0) -> Expression:
        return self._query(column, ColumnType.INSTANCE, rotation)

    def query_selector(self, selector: Selector) -> Expression:
        return SelectorQuery(selector)

    def _query(self, column: Column, expected: ColumnType, rotation: int) -> Expression:
        if column.column_type != expected:
            raise ValueError(f"{column} is not an {expected.value} column")
        return ColumnQuery(column, rotation)

    # --- Constraints ---

    def create_gate(
        self, name: str, constraints: Callable[["ConstraintSystem"], GateConstraints]
    ) -> Gate:
        """Register a custom gate.

        Args:
            name: Gate name used in failure reports
            constraints: Callback returning expressions (optionally as
                (name, expression) pairs) that must vanish on every row

        Returns:
            The registered Gate
        """
        polys = []
        poly_names = []
        for i, item in enumerate(constraints(self)):
            if isinstance(item, tuple):
                poly_name, poly = item
            else:
                poly_name, poly = f"{name}[{i}]", item
            polys.append(poly)
            poly_names.append(poly_name)
        if not polys:
            raise ValueError(f"gate '{name}' has no constraints")
        gate = Gate(name, polys, poly_names)
        self.gates.append(gate)
        logger.debug("gate '%s': %d constraint(s), degree %d", name, len(polys), gate.degree())
        return gate

    def lookup(
        self,
        name: str,
        table_map: Callable[["ConstraintSystem"], Sequence[Tuple[Expression, TableColumn]]],
    ) -> int:
        """Register a lookup of (input expression, table column) pairs.

        Returns:
            Index of the lookup
        """
        pairs = list(table_map(self))
        if not pairs:
            raise ValueError(f"lookup '{name}' is empty")
        inputs = [expr for expr, _ in pairs]
        tables = [table for _, table in pairs]
        for expr in inputs:
            for selector in expr.selectors():
                if not selector.complex:
                    raise ValueError(
                        f"lookup '{name}' queries simple {selector}; use complex_selector()"
                    )
        self.lookups.append(Lookup(name, inputs, tables))
        logger.debug("lookup '%s': %d column(s)", name, len(pairs))
        return len(self.lookups) - 1

    def degree(self) -> int:
        """Maximum expression degree over all gates and lookups."""
        degrees = [g.degree() for g in self.gates] + [l.degree() for l in self.lookups]
        return max(degrees, default=0)
