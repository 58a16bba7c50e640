"""Base64 chip: constrain byte cells to their base64 encoding.

Layout (one row per 6-bit group, rows relative to the chip's region):

    row | encoded_chars | bits_vals | q_base64
    ----+---------------+-----------+---------
     0  | ord(c0)       | v0        | 1
     1  | ord(c1)       | v1        | 1
    ... | ...           | ...       | 1
    g-1 | ord(c_{g-1})  | v_{g-1}   | 1
     *  | (anything)    | (anything)| 0

with a single lookup, checked on every row of the circuit:

    (q * encoded_chars + (1 - q) * DUMMY_CHAR,
     q * bits_vals     + (1 - q) * DUMMY_BITS_VAL)  in  (character, bits_value)

Gated rows must hit a real alphabet row; every other row is forced onto the
dummy row whatever its cells hold, so the lanes can be longer than the data
and shared between several encode/decode calls.

The arithmetic lives in the flex gate column: each byte is decomposed into 8
boolean cells (most significant first), zero bits are appended up to a
multiple of 6, and each group of 6 is recomposed as
32*b0 + 16*b1 + 8*b2 + 4*b3 + 2*b4 + b5. The recomposed cell is copied into
bits_vals and the character witness into encoded_chars, tying both to the
lookup. '=' padding is appended as constants, outside the lookup.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from gadgets.base64_table import (
    DUMMY_BITS_VAL,
    DUMMY_CHAR,
    PADDING_CHAR,
    Base64Table,
    map_bits_value_to_character,
    map_character_to_bits_value,
)
from gadgets.errors import (
    InvalidCharacterError,
    InvalidWitnessError,
    ShapeInconsistencyError,
)
from gates.flex_gate import Context, GateChip
from plonk.constraint_system import ConstraintSystem
from plonk.expressions import Column, Selector
from plonk.layouter import AssignedCell, Region, SimpleLayouter

logger = logging.getLogger(__name__)

BITS_PER_BYTE = 8
BITS_PER_CHAR = 6

# Most significant bit first
BYTE_WEIGHTS = [1 << (BITS_PER_BYTE - 1 - i) for i in range(BITS_PER_BYTE)]
CHAR_WEIGHTS = [1 << (BITS_PER_CHAR - 1 - i) for i in range(BITS_PER_CHAR)]


# --- Shape ---

def standard_encoded_length(decoded_byte_size: int) -> int:
    """RFC 4648 padded length: 4 characters per started 3-byte block."""
    return 4 * ((decoded_byte_size + 2) // 3)


@dataclass(frozen=True)
class Base64Shape:
    """Sizes derived from the maximum decoded byte count."""
    decoded_byte_size: int
    num_6bit_chunks: int
    num_zero_padding_bits: int
    encoded_byte_size: int
    num_equal_paddings: int

    @classmethod
    def from_decoded_byte_size(cls, decoded_byte_size: int) -> "Base64Shape":
        """Derive and validate the circuit shape.

        Raises:
            ValueError: If decoded_byte_size is negative
            ShapeInconsistencyError: If the derived encoded size is not the
                standard base64 length
        """
        if decoded_byte_size < 0:
            raise ValueError(f"decoded_byte_size must be >= 0, got {decoded_byte_size}")

        num_bits = BITS_PER_BYTE * decoded_byte_size
        num_6bit_chunks = -(-num_bits // BITS_PER_CHAR)
        num_zero_padding_bits = BITS_PER_CHAR * num_6bit_chunks - num_bits
        encoded_byte_size = 4 * -(-num_6bit_chunks // 4)
        num_equal_paddings = encoded_byte_size - num_6bit_chunks

        expected = standard_encoded_length(decoded_byte_size)
        if encoded_byte_size != expected:
            raise ShapeInconsistencyError(
                f"encoded size {encoded_byte_size} for {decoded_byte_size} bytes, expected {expected}"
            )
        return cls(
            decoded_byte_size,
            num_6bit_chunks,
            num_zero_padding_bits,
            encoded_byte_size,
            num_equal_paddings,
        )


# --- Chip ---

@dataclass
class Base64Config:
    encoded_chars: Column
    bits_vals: Column
    q_base64: Selector
    table: Base64Table
    shape: Base64Shape


class Base64Chip:
    """Encode/decode gadget for one fixed decoded_byte_size."""

    def __init__(self, config: Base64Config, gate: GateChip):
        self.config = config
        self.gate = gate

    @property
    def shape(self) -> Base64Shape:
        return self.config.shape

    @classmethod
    def configure(cls, meta: ConstraintSystem, gate: GateChip, decoded_byte_size: int) -> "Base64Chip":
        """Allocate the chip's lanes, selector and table, and register its lookup."""
        shape = Base64Shape.from_decoded_byte_size(decoded_byte_size)

        encoded_chars = meta.advice_column()
        bits_vals = meta.advice_column()
        meta.enable_equality(encoded_chars)
        meta.enable_equality(bits_vals)
        q_base64 = meta.complex_selector()
        table = Base64Table.configure(meta)

        def base64_lookup(meta: ConstraintSystem):
            q = meta.query_selector(q_base64)
            one_minus_q = 1 - q
            character = meta.query_advice(encoded_chars, 0)
            bits_value = meta.query_advice(bits_vals, 0)
            return [
                (q * character + one_minus_q * DUMMY_CHAR, table.character),
                (q * bits_value + one_minus_q * DUMMY_BITS_VAL, table.bits_value),
            ]

        meta.lookup("base64 character", base64_lookup)
        logger.debug("base64 chip shape: %s", shape)

        config = Base64Config(encoded_chars, bits_vals, q_base64, table, shape)
        return cls(config, gate)

    def load_table(self, layouter: SimpleLayouter) -> None:
        self.config.table.load(layouter)

    def _assign_group(self, region: Region, row: int, character: AssignedCell, bits_value: AssignedCell) -> None:
        character.copy_advice("encoded char", region, self.config.encoded_chars, row)
        bits_value.copy_advice("bits value", region, self.config.bits_vals, row)
        region.enable_selector("base64 lookup", self.config.q_base64, row)

    # --- Encode ---

    def encode(self, layouter: SimpleLayouter, byte_cells: Sequence[AssignedCell]) -> List[AssignedCell]:
        """Constrain and return the base64 characters of byte_cells.

        Args:
            layouter: Layouter of the enclosing circuit
            byte_cells: Exactly decoded_byte_size cells, each holding a byte

        Returns:
            encoded_byte_size cells holding ASCII codes, '=' padding last

        Raises:
            ValueError: If the number of cells does not match the shape
            InvalidWitnessError: If a cell does not hold a byte
        """
        shape = self.shape
        if len(byte_cells) != shape.decoded_byte_size:
            raise ValueError(f"expected {shape.decoded_byte_size} byte cells, got {len(byte_cells)}")
        for i, cell in enumerate(byte_cells):
            if not 0 <= cell.value < 256:
                raise InvalidWitnessError(f"byte cell {i} holds {cell.value}, not a byte")

        def assign(region: Region) -> List[AssignedCell]:
            ctx = Context(region, self.gate.config)

            bits: List[AssignedCell] = []
            for byte in byte_cells:
                bits += reversed(self.gate.num_to_bits(ctx, byte, BITS_PER_BYTE))
            bits += [ctx.load_zero() for _ in range(shape.num_zero_padding_bits)]

            encoded = []
            for row in range(shape.num_6bit_chunks):
                group = bits[BITS_PER_CHAR * row:BITS_PER_CHAR * (row + 1)]
                bits_value = self.gate.inner_product(ctx, group, CHAR_WEIGHTS)
                character = ctx.load_witness(ord(map_bits_value_to_character(bits_value.value)))
                self._assign_group(region, row, character, bits_value)
                encoded.append(character)

            encoded += [ctx.load_constant(ord(PADDING_CHAR)) for _ in range(shape.num_equal_paddings)]
            return encoded

        encoded = layouter.assign_region("base64 encode", assign)
        logger.debug(
            "base64 encode: %d byte(s) -> %d char(s)", shape.decoded_byte_size, len(encoded)
        )
        return encoded

    # --- Decode ---

    def decode(self, layouter: SimpleLayouter, char_cells: Sequence[AssignedCell]) -> List[AssignedCell]:
        """Constrain and return the bytes whose base64 encoding is char_cells.

        Only canonical encodings are accepted: the zero padding bits of the
        last group must be zero and the trailing characters must be '='.

        Args:
            layouter: Layouter of the enclosing circuit
            char_cells: Exactly encoded_byte_size cells holding ASCII codes

        Returns:
            decoded_byte_size cells holding byte values

        Raises:
            ValueError: If the number of cells does not match the shape
            InvalidCharacterError: If a cell holds a character that cannot
                appear at its position
        """
        shape = self.shape
        if len(char_cells) != shape.encoded_byte_size:
            raise ValueError(f"expected {shape.encoded_byte_size} character cells, got {len(char_cells)}")

        bits_values = [_bits_value_of(cell) for cell in char_cells[:shape.num_6bit_chunks]]
        for cell in char_cells[shape.num_6bit_chunks:]:
            if cell.value != ord(PADDING_CHAR):
                raise InvalidCharacterError(cell.value)

        def assign(region: Region) -> List[AssignedCell]:
            ctx = Context(region, self.gate.config)

            bits: List[AssignedCell] = []
            for row, (character, value) in enumerate(zip(char_cells, bits_values)):
                bits_value = ctx.load_witness(value)
                self._assign_group(region, row, character, bits_value)
                bits += reversed(self.gate.num_to_bits(ctx, bits_value, BITS_PER_CHAR))

            num_data_bits = BITS_PER_BYTE * shape.decoded_byte_size
            for bit in bits[num_data_bits:]:
                self.gate.assert_is_const(ctx, bit, 0)
            for pad in char_cells[shape.num_6bit_chunks:]:
                self.gate.assert_is_const(ctx, pad, ord(PADDING_CHAR))

            return [
                self.gate.inner_product(ctx, bits[BITS_PER_BYTE * i:BITS_PER_BYTE * (i + 1)], BYTE_WEIGHTS)
                for i in range(shape.decoded_byte_size)
            ]

        decoded = layouter.assign_region("base64 decode", assign)
        logger.debug(
            "base64 decode: %d char(s) -> %d byte(s)", shape.encoded_byte_size, len(decoded)
        )
        return decoded


def _bits_value_of(cell: AssignedCell) -> int:
    if not 0 <= cell.value < 128:
        raise InvalidCharacterError(cell.value)
    return map_character_to_bits_value(chr(cell.value))
