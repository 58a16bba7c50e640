"""Gate chips - arithmetic building blocks shared by gadgets."""

from .flex_gate import (
    ConstantCell,
    Context,
    FlexGateConfig,
    GateChip,
    QuantumCell,
    WitnessCell,
)

__all__ = [
    "ConstantCell",
    "Context",
    "FlexGateConfig",
    "GateChip",
    "QuantumCell",
    "WitnessCell",
]
