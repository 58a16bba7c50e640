"""Mock prover: synthesize a circuit and check every constraint directly.

This is the host used to exercise gadgets without a proving system. It runs
Circuit.configure() and Circuit.synthesize(), then checks

1. Gates: every gate polynomial evaluates to zero on every row
2. Lookups: every row's input tuple is a row of the lookup table
3. Permutation: every copy constraint joins cells holding equal values

and reports each violation with the row and the region that produced it.
Unassigned advice/fixed cells read as zero. Unassigned table rows repeat the
table's row 0, so row 0 of a table should hold a tuple that is harmless to
match (the base64 table keeps its dummy tuple there).
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from plonk.circuit import Circuit
from plonk.constraint_system import ConstraintSystem
from plonk.errors import CircuitSizeMismatch, InstanceError, VerificationError
from plonk.expressions import Column, ColumnType, EvaluationContext, Selector, TableColumn
from plonk.layouter import Assignment, CellRef, SimpleLayouter
from plonk.logup import check_lookup
from primitives.field import FF, field_array, reduce, to_ints

logger = logging.getLogger(__name__)


# --- Failures ---

@dataclass(frozen=True)
class ConstraintNotSatisfied:
    gate: str
    constraint: str
    row: int
    location: str

    def __str__(self) -> str:
        return f"constraint '{self.constraint}' of gate '{self.gate}' is not satisfied at {self.location}"


@dataclass(frozen=True)
class LookupNotSatisfied:
    name: str
    lookup_index: int
    row: int
    location: str
    values: tuple

    def __str__(self) -> str:
        return (
            f"lookup {self.lookup_index} '{self.name}' input {self.values} "
            f"is not in the table at {self.location}"
        )


@dataclass(frozen=True)
class PermutationNotSatisfied:
    column: Column
    row: int
    location: str

    def __str__(self) -> str:
        return f"equality constraint not satisfied by cell ({self.column}, {self.location})"


VerifyFailure = Union[ConstraintNotSatisfied, LookupNotSatisfied, PermutationNotSatisfied]


# --- Prover ---

class MockProver:
    """Synthesized circuit instance plus its public inputs."""

    def __init__(self, k: int, cs: ConstraintSystem, assignment: Assignment, instances: List[List[int]]):
        self.k = k
        self.n = 1 << k
        self.cs = cs
        self.assignment = assignment
        self.instances: Dict[Column, List[int]] = {}
        for i, values in enumerate(instances):
            padded = [reduce(v) for v in values] + [0] * (self.n - len(values))
            self.instances[Column(i, ColumnType.INSTANCE)] = padded

    @classmethod
    def run(cls, k: int, circuit: Circuit, instances: Sequence[Sequence[int]]) -> "MockProver":
        """Configure and synthesize circuit on 2^k rows.

        Args:
            k: log2 of the number of rows
            circuit: Circuit to run
            instances: One list of public values per instance column

        Returns:
            MockProver ready for verify()

        Raises:
            CircuitSizeMismatch: If the circuit is sized for another k
            InstanceError: If instances do not fit the instance columns
            PlonkError: Propagated from synthesis (e.g. NotEnoughRowsAvailable)
        """
        if circuit.k is not None and circuit.k != k:
            raise CircuitSizeMismatch(circuit.k, k)

        cs = ConstraintSystem()
        config = circuit.configure(cs)

        n = 1 << k
        if len(instances) != cs.num_instance_columns:
            raise InstanceError(
                f"circuit has {cs.num_instance_columns} instance column(s), got {len(instances)}"
            )
        for i, values in enumerate(instances):
            if len(values) > n:
                raise InstanceError(f"instance column {i} has {len(values)} values for {n} rows")

        assignment = Assignment(cs, k)
        layouter = SimpleLayouter(cs, assignment)
        circuit.synthesize(config, layouter)
        logger.debug(
            "synthesized %s on %d rows: %d region(s), %d copy constraint(s)",
            type(circuit).__name__, n, len(assignment.regions), len(assignment.copies),
        )
        return cls(k, cs, assignment, [list(v) for v in instances])

    # --- Cell access ---

    def _cell_value(self, ref: CellRef) -> int:
        column, row = ref
        if column.column_type == ColumnType.INSTANCE:
            return self.instances[column][row]
        value = self.assignment.cells(column)[row]
        return 0 if value is None else value

    def _location(self, row: int) -> str:
        span = self.assignment.region_at(row)
        if span is None:
            return f"row {row} (outside any region)"
        return f"row {row} (region '{span.name}', offset {row - span.start})"

    def _evaluation_context(self) -> EvaluationContext:
        columns: Dict[Column, FF] = {}
        for column, cells in list(self.assignment.advice.items()) + list(self.assignment.fixed.items()):
            columns[column] = field_array(0 if v is None else v for v in cells)
        for column, values in self.instances.items():
            columns[column] = field_array(values)
        selectors: Dict[Selector, FF] = {
            s: field_array(int(b) for b in bits) for s, bits in self.assignment.selectors.items()
        }
        return EvaluationContext(self.n, columns, selectors)

    def table_values(self, column: TableColumn) -> List[int]:
        """Table column with unassigned rows filled from row 0."""
        cells = self.assignment.tables[column]
        default = cells[0] if cells[0] is not None else 0
        return [default if v is None else v for v in cells]

    # --- Checks ---

    def verify(self) -> List[VerifyFailure]:
        """Check gates, lookups and copy constraints; return every failure."""
        ctx = self._evaluation_context()
        failures: List[VerifyFailure] = []

        for gate in self.cs.gates:
            for poly, poly_name in zip(gate.polys, gate.poly_names):
                values = poly.evaluate(ctx)
                for row in np.flatnonzero(values != 0):
                    failures.append(
                        ConstraintNotSatisfied(gate.name, poly_name, int(row), self._location(int(row)))
                    )

        for index, lookup in enumerate(self.cs.lookups):
            table = set(zip(*(self.table_values(c) for c in lookup.table_columns)))
            inputs = zip(*(to_ints(e.evaluate(ctx)) for e in lookup.input_expressions))
            for row, values in enumerate(inputs):
                if values not in table:
                    failures.append(
                        LookupNotSatisfied(lookup.name, index, row, self._location(row), values)
                    )

        for left, right in self.assignment.copies:
            if self._cell_value(left) != self._cell_value(right):
                for column, row in (left, right):
                    failures.append(PermutationNotSatisfied(column, row, self._location(row)))

        logger.debug("verify: %d failure(s)", len(failures))
        return failures

    def assert_satisfied(self) -> None:
        """Raise VerificationError listing every failure, if any."""
        failures = self.verify()
        if failures:
            raise VerificationError(failures)

    def verify_lookups_logup(self, seed: Optional[int] = None) -> List[str]:
        """Check each lookup with the logUp relation.

        Returns:
            Names of lookups that do not balance
        """
        ctx = self._evaluation_context()
        unbalanced = []
        for lookup in self.cs.lookups:
            inputs = [e.evaluate(ctx) for e in lookup.input_expressions]
            tables = [field_array(self.table_values(c)) for c in lookup.table_columns]
            if not check_lookup(inputs, tables, seed=seed):
                unbalanced.append(lookup.name)
        return unbalanced
