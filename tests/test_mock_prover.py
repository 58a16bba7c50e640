"""Tests for the circuit builder host: layouter, tables, errors and checks."""

import numpy as np
import pytest

from gadgets import Base64CircuitParams, Base64EncodeCircuit
from gadgets.base64_table import Base64Table
from plonk import (
    CircuitSizeMismatch,
    ColumnNotInPermutation,
    ConstraintSystem,
    InstanceError,
    MockProver,
    NotEnoughRowsAvailable,
    PlonkError,
    TableError,
)
from plonk.expressions import EvaluationContext
from plonk.layouter import Assignment, SimpleLayouter
from plonk.logup import check_lookup, compute_multiplicities
from primitives.field import FF, GOLDILOCKS_PRIME, field_array, to_ints


def _layouter(k: int = 4):
    cs = ConstraintSystem()
    advice = cs.advice_column()
    cs.enable_equality(advice)
    plain = cs.advice_column()
    assignment = Assignment(cs, k)
    return cs, advice, plain, assignment, SimpleLayouter(cs, assignment)


class TestLayouter:

    def test_regions_stack_vertically(self) -> None:
        _, advice, _, assignment, layouter = _layouter()
        first = layouter.assign_region("first", lambda r: r.assign_advice("a", advice, 2, 5))
        second = layouter.assign_region("second", lambda r: r.assign_advice("a", advice, 0, 6))
        assert (first.row, second.row) == (2, 3)
        assert [span.name for span in assignment.regions] == ["first", "second"]

    def test_failed_region_is_not_committed(self) -> None:
        _, advice, _, assignment, layouter = _layouter()

        def failing(region):
            region.assign_advice("a", advice, 0, 5)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            layouter.assign_region("failing", failing)
        assert assignment.advice[advice] == [None] * 16
        assert assignment.regions == []

        cell = layouter.assign_region("next", lambda r: r.assign_advice("a", advice, 0, 1))
        assert cell.row == 0

    def test_row_overflow(self) -> None:
        _, advice, _, _, layouter = _layouter(k=4)
        with pytest.raises(NotEnoughRowsAvailable):
            layouter.assign_region("big", lambda r: r.assign_advice("a", advice, 16, 1))

    def test_cell_assigned_twice(self) -> None:
        _, advice, _, assignment, layouter = _layouter()

        def assign(region):
            region.assign_advice("a", advice, 1, 5)
            region.assign_advice("a again", advice, 1, 6)

        with pytest.raises(PlonkError, match="already assigned"):
            layouter.assign_region("twice", assign)
        assert assignment.advice[advice][1] is None

    def test_same_offset_in_other_columns(self) -> None:
        _, advice, plain, _, layouter = _layouter()

        def assign(region):
            return region.assign_advice("a", advice, 0, 5), region.assign_advice("b", plain, 0, 6)

        a, b = layouter.assign_region("side by side", assign)
        assert (a.row, b.row) == (0, 0)

    def test_copy_needs_equality(self) -> None:
        _, advice, plain, _, layouter = _layouter()

        def assign(region):
            a = region.assign_advice("a", advice, 0, 1)
            a.copy_advice("b", region, plain, 0)

        with pytest.raises(ColumnNotInPermutation):
            layouter.assign_region("copy", assign)

    def test_constants_need_constants_column(self) -> None:
        _, advice, _, _, layouter = _layouter()
        with pytest.raises(PlonkError):
            layouter.assign_region(
                "constant", lambda r: r.assign_advice_from_constant("c", advice, 0, 1)
            )

    def test_table_assigned_once(self) -> None:
        cs = ConstraintSystem()
        table = Base64Table.configure(cs)
        layouter = SimpleLayouter(cs, Assignment(cs, 7))
        table.load(layouter)
        with pytest.raises(TableError):
            table.load(layouter)

    def test_table_columns_same_length(self) -> None:
        cs = ConstraintSystem()
        left, right = cs.lookup_table_column(), cs.lookup_table_column()
        layouter = SimpleLayouter(cs, Assignment(cs, 4))

        def assign(table):
            table.assign_cell("left", left, 0, 1)
            table.assign_cell("left", left, 1, 2)
            table.assign_cell("right", right, 0, 1)

        with pytest.raises(TableError):
            layouter.assign_table("ragged", assign)


class TestConstraintSystem:

    def test_simple_selector_not_allowed_in_lookup(self) -> None:
        cs = ConstraintSystem()
        q = cs.selector()
        advice = cs.advice_column()
        table = cs.lookup_table_column()
        with pytest.raises(ValueError):
            cs.lookup("bad", lambda m: [(m.query_selector(q) * m.query_advice(advice), table)])

    def test_query_type_checked(self) -> None:
        cs = ConstraintSystem()
        fixed = cs.fixed_column()
        with pytest.raises(ValueError):
            cs.query_advice(fixed)

    def test_constants_column_must_be_fixed(self) -> None:
        cs = ConstraintSystem()
        with pytest.raises(ValueError):
            cs.enable_constant(cs.advice_column())

    def test_degree(self) -> None:
        cs = ConstraintSystem()
        q = cs.complex_selector()
        a = cs.advice_column()
        table = cs.lookup_table_column()
        cs.lookup("l", lambda m: [(m.query_selector(q) * m.query_advice(a) + (1 - m.query_selector(q)) * 3, table)])
        assert cs.degree() == 2


def test_expression_evaluation_with_rotation() -> None:
    cs = ConstraintSystem()
    a = cs.advice_column()
    expr = cs.query_advice(a, 1) * 2 - cs.query_advice(a, 0) + 1
    ctx = EvaluationContext(4, {a: field_array([1, 2, 3, 4])}, {})
    # row i: 2*a[i+1] - a[i] + 1 (cyclic)
    assert to_ints(expr.evaluate(ctx)) == [4, 5, 6, GOLDILOCKS_PRIME - 1]


class TestMockProver:

    def test_circuit_run_with_other_k(self) -> None:
        params = Base64CircuitParams(k=24, decoded_byte_size=3)
        with pytest.raises(CircuitSizeMismatch) as excinfo:
            MockProver.run(9, Base64EncodeCircuit(params, b"Man"), [list(b"TWFu")])
        assert (excinfo.value.circuit_k, excinfo.value.k) == (24, 9)

    def test_circuit_run_with_its_own_k(self) -> None:
        params = Base64CircuitParams(k=11, decoded_byte_size=3)
        circuit = Base64EncodeCircuit(params, b"Man")
        prover = MockProver.run(circuit.k, circuit, [list(b"TWFu")])
        assert prover.n == 2048
        prover.assert_satisfied()

    def test_instance_column_count_checked(self) -> None:
        params = Base64CircuitParams(k=11, decoded_byte_size=1)
        with pytest.raises(InstanceError):
            MockProver.run(11, Base64EncodeCircuit(params, b"M"), [])

    def test_instance_too_long(self) -> None:
        params = Base64CircuitParams(k=11, decoded_byte_size=1)
        with pytest.raises(InstanceError):
            MockProver.run(11, Base64EncodeCircuit(params, b"M"), [[0] * 4096])

    def test_unassigned_table_rows_repeat_row_zero(self) -> None:
        params = Base64CircuitParams(k=11, decoded_byte_size=1)
        prover = MockProver.run(11, Base64EncodeCircuit(params, b"M"), [list(b"TQ==")])
        values = prover.table_values(prover.cs.lookups[0].table_columns[0])
        assert len(values) == 2048
        assert values[65:] == [256] * (2048 - 65)

    def test_failure_is_readable(self) -> None:
        params = Base64CircuitParams(k=11, decoded_byte_size=1)
        prover = MockProver.run(11, Base64EncodeCircuit(params, b"M"), [list(b"TQ=A")])
        text = "\n".join(str(f) for f in prover.verify())
        assert "equality constraint not satisfied" in text


class TestLogup:

    def test_multiplicities(self) -> None:
        table = [field_array([5, 6, 7, 5])]
        inputs = [field_array([5, 5, 7, 9])]
        multiplicities, missing = compute_multiplicities(inputs, table)
        assert to_ints(multiplicities) == [2, 0, 1, 0]
        assert missing == 1

    def test_balanced(self) -> None:
        table = [field_array([1, 2, 3, 4]), field_array([10, 20, 30, 40])]
        inputs = [field_array([1, 1, 4, 3]), field_array([10, 10, 40, 30])]
        assert check_lookup(inputs, table, seed=1)

    def test_unbalanced(self) -> None:
        table = [field_array([1, 2, 3, 4]), field_array([10, 20, 30, 40])]
        inputs = [field_array([1, 1, 4, 3]), field_array([10, 20, 40, 30])]
        assert not check_lookup(inputs, table, seed=1)

    def test_dimension_mismatch(self) -> None:
        with pytest.raises(ValueError):
            check_lookup([field_array([1])], [field_array([1]), field_array([1])])


def test_field_helpers() -> None:
    assert to_ints(field_array([-1, 0, 1])) == [GOLDILOCKS_PRIME - 1, 0, 1]
    assert isinstance(field_array([1, 2]), FF)
    assert np.array_equal(field_array([3]), FF([3]))
