"""Ready-made circuits around Base64Chip.

Base64EncodeCircuit witnesses bytes and exposes their encoding as public
instance values (one ASCII code per row); Base64DecodeCircuit does the
reverse. Both also serve as the reference for wiring the chip into a larger
circuit.
"""

from dataclasses import dataclass
from typing import List, Sequence, Union

from gadgets.base64_chip import Base64Chip
from gadgets.params import Base64CircuitParams
from gates.flex_gate import Context, FlexGateConfig, GateChip
from plonk.circuit import Circuit
from plonk.constraint_system import ConstraintSystem
from plonk.expressions import Column
from plonk.layouter import AssignedCell, Region, SimpleLayouter


def encoded_instance(encoded: Union[str, bytes]) -> List[int]:
    """Instance column values for an encoded string (ASCII codes)."""
    if isinstance(encoded, str):
        encoded = encoded.encode("ascii")
    return list(encoded)


def decoded_instance(data: bytes) -> List[int]:
    """Instance column values for decoded bytes."""
    return list(data)


@dataclass
class Base64CircuitConfig:
    gate: GateChip
    base64: Base64Chip
    instance: Column


def _configure(meta: ConstraintSystem, params: Base64CircuitParams) -> Base64CircuitConfig:
    gate = GateChip(FlexGateConfig.configure(meta))
    base64 = Base64Chip.configure(meta, gate, params.decoded_byte_size)
    instance = meta.instance_column()
    meta.enable_equality(instance)
    return Base64CircuitConfig(gate, base64, instance)


def _load_witnesses(layouter: SimpleLayouter, config: Base64CircuitConfig, name: str, values: Sequence[int]) -> List[AssignedCell]:
    def assign(region: Region) -> List[AssignedCell]:
        ctx = Context(region, config.gate.config)
        return [ctx.load_witness(v) for v in values]

    return layouter.assign_region(name, assign)


def _expose(layouter: SimpleLayouter, config: Base64CircuitConfig, cells: Sequence[AssignedCell]) -> None:
    for row, cell in enumerate(cells):
        layouter.constrain_instance(cell, config.instance, row)


class Base64EncodeCircuit(Circuit[Base64CircuitConfig]):
    """Public output: base64 encoding of the private bytes."""

    def __init__(self, params: Base64CircuitParams, data: bytes):
        self.params = params
        self.data = bytes(data)

    @property
    def k(self) -> int:
        return self.params.k

    def configure(self, meta: ConstraintSystem) -> Base64CircuitConfig:
        return _configure(meta, self.params)

    def synthesize(self, config: Base64CircuitConfig, layouter: SimpleLayouter) -> None:
        config.base64.load_table(layouter)
        byte_cells = _load_witnesses(layouter, config, "load bytes", self.data)
        encoded = config.base64.encode(layouter, byte_cells)
        _expose(layouter, config, encoded)


class Base64DecodeCircuit(Circuit[Base64CircuitConfig]):
    """Public output: bytes whose base64 encoding is the private string."""

    def __init__(self, params: Base64CircuitParams, encoded: Union[str, bytes]):
        self.params = params
        self.encoded = encoded_instance(encoded)

    @property
    def k(self) -> int:
        return self.params.k

    def configure(self, meta: ConstraintSystem) -> Base64CircuitConfig:
        return _configure(meta, self.params)

    def synthesize(self, config: Base64CircuitConfig, layouter: SimpleLayouter) -> None:
        config.base64.load_table(layouter)
        char_cells = _load_witnesses(layouter, config, "load encoded chars", self.encoded)
        decoded = config.base64.decode(layouter, char_cells)
        _expose(layouter, config, decoded)
