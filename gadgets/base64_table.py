"""Static lookup table relating 6-bit values to base64 characters.

Rows (bits_value, character), 65 in total:

    row 0:      (DUMMY_BITS_VAL, DUMMY_CHAR) = (64, 256)
    row 1 + v:  (v, ord(charOf(v)))           for v in 0..63

The dummy row is what rows without the base64 selector look up (see
Base64Chip), and because it sits at row 0 it is also what unassigned table
rows repeat. Both of its values are outside the real ranges (6-bit values
stop at 63, characters are single bytes), so no real row can collide with it.
"""

import logging
from typing import List, Tuple

from gadgets.errors import InvalidBitsValueError, InvalidCharacterError
from plonk.constraint_system import ConstraintSystem
from plonk.expressions import TableColumn
from plonk.layouter import SimpleLayouter, Table

logger = logging.getLogger(__name__)

DUMMY_CHAR = 256
DUMMY_BITS_VAL = 64

PADDING_CHAR = "="

# Dummy row(s) at the top of the table
TABLE_OFFSET = 1


def map_bits_value_to_character(bits_val: int) -> str:
    """RFC 4648 standard alphabet: 0..63 -> 'A'..'Z', 'a'..'z', '0'..'9', '+', '/'."""
    if 0 <= bits_val <= 25:
        return chr(ord("A") + bits_val)
    if 26 <= bits_val <= 51:
        return chr(ord("a") + bits_val - 26)
    if 52 <= bits_val <= 61:
        return chr(ord("0") + bits_val - 52)
    if bits_val == 62:
        return "+"
    if bits_val == 63:
        return "/"
    raise InvalidBitsValueError(bits_val)


def map_character_to_bits_value(character: str) -> int:
    """Inverse of map_bits_value_to_character. The padding '=' has no value."""
    if len(character) != 1:
        raise ValueError(f"expected a single character, got {character!r}")
    if "A" <= character <= "Z":
        return ord(character) - ord("A")
    if "a" <= character <= "z":
        return ord(character) - ord("a") + 26
    if "0" <= character <= "9":
        return ord(character) - ord("0") + 52
    if character == "+":
        return 62
    if character == "/":
        return 63
    raise InvalidCharacterError(ord(character))


def table_rows() -> List[Tuple[int, int]]:
    """All (bits_value, character code) rows in load order, dummy first."""
    rows = [(DUMMY_BITS_VAL, DUMMY_CHAR)]
    rows += [(v, ord(map_bits_value_to_character(v))) for v in range(64)]
    return rows


class Base64Table:
    """Lookup table columns for the base64 alphabet."""

    def __init__(self, character: TableColumn, bits_value: TableColumn):
        # ASCII code of the character, e.g. 'a' is 97
        self.character = character
        # 6-bit value the character encodes, 0..63
        self.bits_value = bits_value

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> "Base64Table":
        return cls(meta.lookup_table_column(), meta.lookup_table_column())

    def load(self, layouter: SimpleLayouter) -> None:
        """Assign the 65 table rows. Call once per circuit."""

        def assign(table: Table) -> None:
            for row, (bits_value, character) in enumerate(table_rows()):
                table.assign_cell("bits_value", self.bits_value, row, bits_value)
                table.assign_cell("character", self.character, row, character)

        layouter.assign_table("load base64 table", assign)
        logger.debug("loaded base64 table: %d rows", 64 + TABLE_OFFSET)
