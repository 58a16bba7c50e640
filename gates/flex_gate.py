"""Flex gate: general arithmetic on a single advice column.

One vertical gate does all the work:

    q * (a[0] + a[1] * a[2] - a[3]) = 0

where a[i] is the advice column at rotation i. Every operation lays out a
short run of cells in the column and enables q on the rows where the gate
must hold:

    add(x, y):            [x, y, 1, x+y]                q at 0
    mul(x, y):            [0, x, y, x*y]                q at 0
    sub(x, y):            [x-y, y, 1, x]                q at 0
    assert_bit(b):        [0, b, b, b]                  q at 0
    inner_product(v, w):  [0, v0, w0, s1, v1, w1, s2..] q at 0, 3, 6, ...

Inputs are QuantumCells: an AssignedCell (copied in and constrained equal to
the original), a WitnessCell (fresh witness) or a ConstantCell (pinned to the
constants column).
"""

from dataclasses import dataclass
from typing import List, Sequence, Union

from plonk.constraint_system import ConstraintSystem
from plonk.expressions import Column, Selector
from plonk.layouter import AssignedCell, Region
from primitives.field import reduce


@dataclass(frozen=True)
class WitnessCell:
    value: int


@dataclass(frozen=True)
class ConstantCell:
    value: int


QuantumCell = Union[AssignedCell, WitnessCell, ConstantCell]


def value_of(cell: QuantumCell) -> int:
    if not isinstance(cell, (AssignedCell, WitnessCell, ConstantCell)):
        raise TypeError(f"expected a QuantumCell, got {type(cell).__name__}")
    return reduce(cell.value)


@dataclass
class FlexGateConfig:
    value: Column
    constants: Column
    q_enable: Selector

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> "FlexGateConfig":
        value = meta.advice_column()
        meta.enable_equality(value)
        constants = meta.fixed_column()
        meta.enable_constant(constants)
        q_enable = meta.selector()

        def vertical_gate(meta: ConstraintSystem):
            q = meta.query_selector(q_enable)
            a = meta.query_advice(value, 0)
            b = meta.query_advice(value, 1)
            c = meta.query_advice(value, 2)
            d = meta.query_advice(value, 3)
            return [("a + b*c = d", q * (a + b * c - d))]

        meta.create_gate("flex gate", vertical_gate)
        return cls(value, constants, q_enable)


class Context:
    """Cursor over the flex gate column inside one region."""

    def __init__(self, region: Region, config: FlexGateConfig, offset: int = 0):
        self.region = region
        self.config = config
        self.offset = offset

    def _assign_next(self, cell: QuantumCell) -> AssignedCell:
        offset = self.offset
        self.offset += 1
        column = self.config.value
        if isinstance(cell, AssignedCell):
            return cell.copy_advice("copy", self.region, column, offset)
        if isinstance(cell, WitnessCell):
            return self.region.assign_advice("witness", column, offset, cell.value)
        if isinstance(cell, ConstantCell):
            return self.region.assign_advice_from_constant("constant", column, offset, cell.value)
        raise TypeError(f"expected a QuantumCell, got {type(cell).__name__}")

    def assign_cells(self, cells: Sequence[QuantumCell], gate_offsets: Sequence[int] = ()) -> List[AssignedCell]:
        """Lay out cells consecutively, enabling the gate at the given relative offsets."""
        start = self.offset
        assigned = [self._assign_next(cell) for cell in cells]
        for gate_offset in gate_offsets:
            self.region.enable_selector("flex gate", self.config.q_enable, start + gate_offset)
        return assigned

    def load_witness(self, value: int) -> AssignedCell:
        return self._assign_next(WitnessCell(value))

    def load_constant(self, value: int) -> AssignedCell:
        return self._assign_next(ConstantCell(value))

    def load_zero(self) -> AssignedCell:
        return self.load_constant(0)

    def constrain_equal(self, left: AssignedCell, right: AssignedCell) -> None:
        self.region.constrain_equal(left, right)


class GateChip:
    """Arithmetic operations built on the flex gate."""

    def __init__(self, config: FlexGateConfig):
        self.config = config

    def add(self, ctx: Context, a: QuantumCell, b: QuantumCell) -> AssignedCell:
        out = value_of(a) + value_of(b)
        cells = ctx.assign_cells([a, b, ConstantCell(1), WitnessCell(out)], gate_offsets=[0])
        return cells[3]

    def sub(self, ctx: Context, a: QuantumCell, b: QuantumCell) -> AssignedCell:
        out = value_of(a) - value_of(b)
        cells = ctx.assign_cells([WitnessCell(out), b, ConstantCell(1), a], gate_offsets=[0])
        return cells[0]

    def mul(self, ctx: Context, a: QuantumCell, b: QuantumCell) -> AssignedCell:
        out = value_of(a) * value_of(b)
        cells = ctx.assign_cells([ConstantCell(0), a, b, WitnessCell(out)], gate_offsets=[0])
        return cells[3]

    def assert_bit(self, ctx: Context, a: QuantumCell) -> None:
        """Constrain a to 0 or 1 (a*a = a)."""
        ctx.assign_cells([ConstantCell(0), a, a, a], gate_offsets=[0])

    def assert_is_const(self, ctx: Context, a: AssignedCell, constant: int) -> None:
        ctx.constrain_equal(a, ctx.load_constant(constant))

    def _inner_product_cells(
        self, ctx: Context, values: Sequence[QuantumCell], weights: Sequence[int]
    ) -> List[AssignedCell]:
        if len(values) != len(weights):
            raise ValueError(f"Dimension mismatch: {len(values)} vs {len(weights)}")
        acc = 0
        cells: List[QuantumCell] = [ConstantCell(0)]
        for value, weight in zip(values, weights):
            acc = reduce(acc + value_of(value) * weight)
            cells += [value, ConstantCell(weight), WitnessCell(acc)]
        return ctx.assign_cells(cells, gate_offsets=range(0, 3 * len(values), 3))

    def inner_product(self, ctx: Context, values: Sequence[QuantumCell], weights: Sequence[int]) -> AssignedCell:
        """Σ values[i] * weights[i] with constant weights."""
        return self._inner_product_cells(ctx, values, weights)[-1]

    def num_to_bits(self, ctx: Context, a: AssignedCell, range_bits: int) -> List[AssignedCell]:
        """Decompose a into range_bits boolean cells, least significant first.

        The recomposition Σ bits[i] * 2^i is constrained equal to a, so a value
        of range_bits or more bits leaves the circuit unsatisfied.
        """
        bits = [(value_of(a) >> i) & 1 for i in range(range_bits)]
        cells = self._inner_product_cells(
            ctx, [WitnessCell(b) for b in bits], [1 << i for i in range(range_bits)]
        )
        ctx.constrain_equal(cells[-1], a)
        bit_cells = [cells[1 + 3 * i] for i in range(range_bits)]
        for bit in bit_cells:
            self.assert_bit(ctx, bit)
        return bit_cells
