"""Base64 gadget: lookup table, chip, parameters and example circuits."""

from .base64_chip import Base64Chip, Base64Config, Base64Shape
from .base64_circuit import (
    Base64DecodeCircuit,
    Base64EncodeCircuit,
    decoded_instance,
    encoded_instance,
)
from .base64_table import (
    DUMMY_BITS_VAL,
    DUMMY_CHAR,
    Base64Table,
    map_bits_value_to_character,
    map_character_to_bits_value,
    table_rows,
)
from .errors import (
    Base64Error,
    InvalidBitsValueError,
    InvalidCharacterError,
    InvalidWitnessError,
    ShapeInconsistencyError,
)
from .params import Base64CircuitParams

__all__ = [
    "Base64Chip",
    "Base64CircuitParams",
    "Base64Config",
    "Base64DecodeCircuit",
    "Base64EncodeCircuit",
    "Base64Error",
    "Base64Shape",
    "Base64Table",
    "DUMMY_BITS_VAL",
    "DUMMY_CHAR",
    "InvalidBitsValueError",
    "InvalidCharacterError",
    "InvalidWitnessError",
    "ShapeInconsistencyError",
    "decoded_instance",
    "encoded_instance",
    "map_bits_value_to_character",
    "map_character_to_bits_value",
    "table_rows",
]
