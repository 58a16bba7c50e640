"""Witness assignment: regions, tables and the floor planner.

Circuit.synthesize() receives a Layouter and assigns cells through scoped
callbacks:

    def assign(region):
        a = region.assign_advice("a", config.value, 0, 7)
        region.enable_selector("q", config.q_enable, 0)
        return a

    cell = layouter.assign_region("my region", assign)

Offsets inside a region are relative; the layouter stacks regions vertically
(each region starts on the first row after the previous one). Writes made
inside a callback are buffered on the Region and only committed to the
Assignment once the callback returns, so a region that raises leaves no
trace in the circuit.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set, Tuple, TypeVar

from plonk.constraint_system import ConstraintSystem
from plonk.errors import (
    ColumnNotInPermutation,
    NotEnoughRowsAvailable,
    PlonkError,
    TableError,
)
from plonk.expressions import Column, ColumnType, Selector, TableColumn
from primitives.field import reduce

logger = logging.getLogger(__name__)

T = TypeVar("T")

CellRef = Tuple[Column, int]


@dataclass(frozen=True)
class AssignedCell:
    """A cell that has been given a value. Rows are absolute."""
    value: int
    column: Column
    row: int

    def copy_advice(self, name: str, region: "Region", column: Column, offset: int) -> "AssignedCell":
        """Assign this value into another advice cell and constrain them equal."""
        copied = region.assign_advice(name, column, offset, self.value)
        region.constrain_equal(self, copied)
        return copied


@dataclass(frozen=True)
class RegionSpan:
    name: str
    start: int
    end: int


class Assignment:
    """Committed cell values of one circuit instance (n = 2^k rows)."""

    def __init__(self, cs: ConstraintSystem, k: int):
        self.cs = cs
        self.k = k
        self.n = 1 << k
        self.advice: Dict[Column, List[Optional[int]]] = {
            Column(i, ColumnType.ADVICE): [None] * self.n for i in range(cs.num_advice_columns)
        }
        self.fixed: Dict[Column, List[Optional[int]]] = {
            Column(i, ColumnType.FIXED): [None] * self.n for i in range(cs.num_fixed_columns)
        }
        self.selectors: Dict[Selector, List[bool]] = {
            s: [False] * self.n for s in cs.selectors
        }
        self.tables: Dict[TableColumn, List[Optional[int]]] = {
            TableColumn(i): [None] * self.n for i in range(cs.num_table_columns)
        }
        self.copies: List[Tuple[CellRef, CellRef]] = []
        self.annotations: Dict[CellRef, str] = {}
        self.regions: List[RegionSpan] = []

    def check_row(self, row: int) -> None:
        if row < 0 or row >= self.n:
            raise NotEnoughRowsAvailable(self.k, row)

    def cells(self, column: Column) -> List[Optional[int]]:
        if column.column_type == ColumnType.ADVICE:
            return self.advice[column]
        if column.column_type == ColumnType.FIXED:
            return self.fixed[column]
        raise PlonkError(f"cannot assign to {column}")

    def region_at(self, row: int) -> Optional[RegionSpan]:
        for span in self.regions:
            if span.start <= row < span.end:
                return span
        return None


class Region:
    """Buffered assignments of one region, relative to its first row."""

    def __init__(self, name: str, offset: int, assignment: Assignment):
        self.name = name
        self.offset = offset
        self.rows_used = 0
        self._assignment = assignment
        self._cells: List[Tuple[Column, int, int, str]] = []
        self._written: Set[CellRef] = set()
        self._selectors: List[Tuple[Selector, int]] = []
        self._copies: List[Tuple[CellRef, CellRef]] = []
        self._constants: List[Tuple[AssignedCell, int]] = []

    def _row(self, offset: int) -> int:
        row = self.offset + offset
        self._assignment.check_row(row)
        self.rows_used = max(self.rows_used, offset + 1)
        return row

    def assign_advice(self, name: str, column: Column, offset: int, value: int) -> AssignedCell:
        if column.column_type != ColumnType.ADVICE:
            raise PlonkError(f"{column} is not an advice column")
        return self._assign(name, column, offset, value)

    def assign_fixed(self, name: str, column: Column, offset: int, value: int) -> AssignedCell:
        if column.column_type != ColumnType.FIXED:
            raise PlonkError(f"{column} is not a fixed column")
        return self._assign(name, column, offset, value)

    def _assign(self, name: str, column: Column, offset: int, value: int) -> AssignedCell:
        row = self._row(offset)
        if (column, row) in self._written:
            raise PlonkError(
                f"{column} at offset {offset} of region '{self.name}' is already assigned"
            )
        self._written.add((column, row))
        value = reduce(value)
        self._cells.append((column, row, value, name))
        return AssignedCell(value, column, row)

    def assign_advice_from_constant(
        self, name: str, column: Column, offset: int, constant: int
    ) -> AssignedCell:
        """Assign an advice cell pinned to a constant via the constants column."""
        if column not in self._assignment.cs.equality_columns:
            raise ColumnNotInPermutation(column)
        cell = self.assign_advice(name, column, offset, constant)
        self._constants.append((cell, cell.value))
        return cell

    def constrain_equal(self, left: AssignedCell, right: AssignedCell) -> None:
        for cell in (left, right):
            if cell.column not in self._assignment.cs.equality_columns:
                raise ColumnNotInPermutation(cell.column)
        self._copies.append(((left.column, left.row), (right.column, right.row)))

    def enable_selector(self, name: str, selector: Selector, offset: int) -> None:
        self._selectors.append((selector, self._row(offset)))


class Table:
    """Buffered assignments of lookup table columns, rows starting at 0."""

    def __init__(self, name: str, assignment: Assignment):
        self.name = name
        self._assignment = assignment
        self._cells: List[Tuple[TableColumn, int, int]] = []

    def assign_cell(self, name: str, column: TableColumn, offset: int, value: int) -> None:
        self._assignment.check_row(offset)
        self._cells.append((column, offset, reduce(value)))


class SimpleLayouter:
    """Floor planner that stacks regions one after another."""

    def __init__(self, cs: ConstraintSystem, assignment: Assignment):
        self.cs = cs
        self.assignment = assignment
        self._cursor = 0
        self._constants_cursor = 0

    def assign_region(self, name: str, assignment_fn: Callable[[Region], T]) -> T:
        """Run assignment_fn on a fresh region and commit it if it returns.

        Exceptions raised by assignment_fn propagate unchanged and nothing from
        the region is committed.
        """
        region = Region(name, self._cursor, self.assignment)
        result = assignment_fn(region)
        self._commit(region)
        return result

    def _commit(self, region: Region) -> None:
        placed = self._place_constants(region)
        for column, row, value, annotation in region._cells:
            self.assignment.cells(column)[row] = value
            self.assignment.annotations[(column, row)] = annotation
        for selector, row in region._selectors:
            self.assignment.selectors[selector][row] = True
        self.assignment.copies.extend(region._copies)
        for cell, (column, row) in placed:
            self.assignment.fixed[column][row] = cell.value
            self.assignment.annotations[(column, row)] = "constant"
            self.assignment.copies.append(((column, row), (cell.column, cell.row)))

        if region.rows_used:
            end = region.offset + region.rows_used
            self.assignment.regions.append(RegionSpan(region.name, region.offset, end))
            self._cursor = end
        logger.debug(
            "region '%s': rows [%d, %d), %d constant(s)",
            region.name, region.offset, region.offset + region.rows_used, len(placed),
        )

    def _place_constants(self, region: Region) -> List[Tuple[AssignedCell, CellRef]]:
        if not region._constants:
            return []
        if not self.cs.constants:
            raise PlonkError(f"region '{region.name}' uses constants but no constants column is enabled")
        column = self.cs.constants[0]
        start = self._constants_cursor
        self.assignment.check_row(start + len(region._constants) - 1)
        self._constants_cursor += len(region._constants)
        return [(cell, (column, start + i)) for i, (cell, _) in enumerate(region._constants)]

    def assign_table(self, name: str, assignment_fn: Callable[[Table], None]) -> None:
        """Assign static lookup columns. Each table column may be assigned once."""
        table = Table(name, self.assignment)
        assignment_fn(table)

        rows: Dict[TableColumn, int] = {}
        for column, offset, _ in table._cells:
            if any(v is not None for v in self.assignment.tables[column]):
                raise TableError(f"{column} in table '{name}' was already assigned")
            rows[column] = max(rows.get(column, 0), offset + 1)
        if len(set(rows.values())) > 1:
            raise TableError(f"table '{name}' has columns of different lengths: {rows}")

        for column, offset, value in table._cells:
            self.assignment.tables[column][offset] = value
        logger.debug("table '%s': %d row(s)", name, max(rows.values(), default=0))

    def constrain_instance(self, cell: AssignedCell, column: Column, row: int) -> None:
        """Constrain an assigned cell to equal instance value `row` of `column`."""
        if column.column_type != ColumnType.INSTANCE:
            raise PlonkError(f"{column} is not an instance column")
        for c in (cell.column, column):
            if c not in self.cs.equality_columns:
                raise ColumnNotInPermutation(c)
        self.assignment.check_row(row)
        self.assignment.copies.append(((cell.column, cell.row), (column, row)))
