"""Tests for the base64 lookup table and character mapping."""

import string

import pytest

from gadgets.base64_table import (
    DUMMY_BITS_VAL,
    DUMMY_CHAR,
    map_bits_value_to_character,
    map_character_to_bits_value,
    table_rows,
)
from gadgets.errors import InvalidBitsValueError, InvalidCharacterError

ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"


def test_mapping_is_rfc4648_standard_alphabet() -> None:
    assert "".join(map_bits_value_to_character(v) for v in range(64)) == ALPHABET


def test_inverse_mapping() -> None:
    for v, character in enumerate(ALPHABET):
        assert map_character_to_bits_value(character) == v


@pytest.mark.parametrize("value", [-1, 64, DUMMY_BITS_VAL, 255])
def test_out_of_range_value_rejected(value: int) -> None:
    with pytest.raises(InvalidBitsValueError):
        map_bits_value_to_character(value)


@pytest.mark.parametrize("character", ["=", "-", "_", " ", "\n", "é"])
def test_non_alphabet_character_rejected(character: str) -> None:
    with pytest.raises(InvalidCharacterError):
        map_character_to_bits_value(character)


def test_multi_character_string_rejected() -> None:
    with pytest.raises(ValueError):
        map_character_to_bits_value("AB")


class TestTableRows:

    def test_has_dummy_plus_64_rows(self) -> None:
        assert len(table_rows()) == 65

    def test_dummy_row_first(self) -> None:
        """Row 0 is the sentinel; unassigned table rows repeat it."""
        assert table_rows()[0] == (DUMMY_BITS_VAL, DUMMY_CHAR)

    def test_dummy_outside_real_ranges(self) -> None:
        real = table_rows()[1:]
        assert all(v < DUMMY_BITS_VAL for v, _ in real)
        assert all(c < DUMMY_CHAR for _, c in real)

    def test_real_rows(self) -> None:
        assert table_rows()[1:] == [(v, ord(c)) for v, c in enumerate(ALPHABET)]
