"""Tests for the flex gate chip and its Context."""

from typing import Callable, List

import pytest

from gates import ConstantCell, Context, FlexGateConfig, GateChip, WitnessCell
from plonk import (
    AssignedCell,
    Circuit,
    ConstraintNotSatisfied,
    ConstraintSystem,
    MockProver,
    PermutationNotSatisfied,
)

K = 8

Body = Callable[[GateChip, Context], List[AssignedCell]]


class GateCircuit(Circuit[GateChip]):
    """Runs `body` in a single region and keeps the cells it returns."""

    def __init__(self, body: Body):
        self.body = body
        self.cells: List[AssignedCell] = []

    def configure(self, meta: ConstraintSystem) -> GateChip:
        return GateChip(FlexGateConfig.configure(meta))

    def synthesize(self, gate: GateChip, layouter) -> None:
        def assign(region):
            return self.body(gate, Context(region, gate.config))

        self.cells = layouter.assign_region("gate test", assign)


def run(body: Body):
    circuit = GateCircuit(body)
    prover = MockProver.run(K, circuit, [])
    return prover, [cell.value for cell in circuit.cells]


def test_gate_shape() -> None:
    meta = ConstraintSystem()
    FlexGateConfig.configure(meta)
    assert len(meta.gates) == 1
    assert meta.gates[0].degree() == 3
    assert len(meta.constants) == 1


def test_add_sub_mul() -> None:
    def body(gate, ctx):
        a = ctx.load_witness(6)
        b = ctx.load_witness(7)
        return [gate.add(ctx, a, b), gate.sub(ctx, a, b), gate.mul(ctx, a, ConstantCell(5))]

    prover, values = run(body)
    assert values == [13, (6 - 7) % 0xFFFFFFFF00000001, 30]
    assert prover.verify() == []


def test_inner_product() -> None:
    def body(gate, ctx):
        values = [ctx.load_witness(v) for v in (1, 0, 1, 1, 0, 1)]
        return [gate.inner_product(ctx, values, [32, 16, 8, 4, 2, 1])]

    prover, values = run(body)
    assert values == [0b101101]
    assert prover.verify() == []


def test_inner_product_dimension_mismatch() -> None:
    def body(gate, ctx):
        return [gate.inner_product(ctx, [WitnessCell(1)], [1, 2])]

    with pytest.raises(ValueError):
        run(body)


def test_num_to_bits_little_endian() -> None:
    def body(gate, ctx):
        return gate.num_to_bits(ctx, ctx.load_witness(0xB5), 8)

    prover, values = run(body)
    assert values == [1, 0, 1, 0, 1, 1, 0, 1]
    assert prover.verify() == []


def test_num_to_bits_out_of_range_fails() -> None:
    def body(gate, ctx):
        return gate.num_to_bits(ctx, ctx.load_witness(300), 8)

    prover, _ = run(body)
    failures = prover.verify()
    assert failures
    assert all(isinstance(f, PermutationNotSatisfied) for f in failures)


def test_assert_bit_rejects_two() -> None:
    def body(gate, ctx):
        gate.assert_bit(ctx, WitnessCell(2))
        return []

    prover, _ = run(body)
    failures = prover.verify()
    assert len(failures) == 1
    assert isinstance(failures[0], ConstraintNotSatisfied)
    assert failures[0].gate == "flex gate"


def test_tampered_witness_breaks_gate() -> None:
    def body(gate, ctx):
        a, b = ctx.load_witness(2), ctx.load_witness(3)
        # add layout with a wrong result cell
        return ctx.assign_cells([a, b, ConstantCell(1), WitnessCell(6)], gate_offsets=[0])[3:]

    prover, _ = run(body)
    assert any(isinstance(f, ConstraintNotSatisfied) for f in prover.verify())


def test_assert_is_const() -> None:
    def body(gate, ctx):
        a = ctx.load_witness(61)
        gate.assert_is_const(ctx, a, ord("="))
        b = ctx.load_witness(62)
        gate.assert_is_const(ctx, b, ord("="))
        return []

    prover, _ = run(body)
    failures = prover.verify()
    assert failures
    assert all(isinstance(f, PermutationNotSatisfied) for f in failures)


def test_raw_int_is_not_a_quantum_cell() -> None:
    def body(gate, ctx):
        return [gate.add(ctx, 1, 2)]

    with pytest.raises(TypeError):
        run(body)
