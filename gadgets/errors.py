"""Errors raised by the base64 gadget before any constraint is composed."""


class Base64Error(Exception):
    """Base class for base64 gadget errors."""


class ShapeInconsistencyError(Base64Error, ValueError):
    """Derived circuit sizes disagree with the base64 length formula."""


class InvalidBitsValueError(Base64Error, ValueError):
    """A 6-bit value outside 0..63 was mapped to a character."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Invalid 6-bit value: {value}")


class InvalidCharacterError(Base64Error, ValueError):
    """A character outside the RFC 4648 standard alphabet was mapped to a value."""

    def __init__(self, character: int):
        self.character = character
        shown = repr(chr(character)) if 0 <= character < 0x110000 else str(character)
        super().__init__(f"Invalid base64 character: {shown}")


class InvalidWitnessError(Base64Error, ValueError):
    """An input cell holds a value the gadget cannot encode or decode."""
