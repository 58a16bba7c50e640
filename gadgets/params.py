"""Circuit parameters for the base64 circuits."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Union

from gadgets.base64_chip import Base64Shape

MAX_K = 24


@dataclass(frozen=True)
class Base64CircuitParams:
    """Size parameters fixed before any witness is known.

    Attributes:
        k: log2 of the number of circuit rows
        decoded_byte_size: Number of bytes on the decoded side
    """
    k: int
    decoded_byte_size: int

    def __post_init__(self):
        if not 1 <= self.k <= MAX_K:
            raise ValueError(f"k must be in [1, {MAX_K}], got {self.k}")
        if self.decoded_byte_size < 0:
            raise ValueError(f"decoded_byte_size must be >= 0, got {self.decoded_byte_size}")

    @property
    def shape(self) -> Base64Shape:
        return Base64Shape.from_decoded_byte_size(self.decoded_byte_size)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Base64CircuitParams":
        missing = {"k", "decoded_byte_size"} - set(data)
        if missing:
            raise KeyError(f"Missing circuit parameter(s): {sorted(missing)}")
        return cls(k=int(data["k"]), decoded_byte_size=int(data["decoded_byte_size"]))

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "Base64CircuitParams":
        """Load from a JSON file with "k" and "decoded_byte_size" keys."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
