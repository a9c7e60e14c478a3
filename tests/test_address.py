"""Tests for the sheets address codec."""

from __future__ import annotations

import pytest

from sheets._address import (
    Address,
    address_from_text,
    column_index,
    column_letters,
    format_address,
    parse_address,
)


class TestColumnLetters:
    def test_single_letters(self) -> None:
        assert column_letters(0) == "A"
        assert column_letters(1) == "B"
        assert column_letters(25) == "Z"

    def test_two_letters_follow_z(self) -> None:
        assert column_letters(26) == "AA"
        assert column_letters(27) == "AB"
        assert column_letters(51) == "AZ"
        assert column_letters(52) == "BA"
        assert column_letters(701) == "ZZ"
        assert column_letters(702) == "AAA"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="Negative"):
            column_letters(-1)

    def test_column_index_inverse(self) -> None:
        assert column_index("A") == 0
        assert column_index("Z") == 25
        assert column_index("AA") == 26
        assert column_index("AZ") == 51

    def test_column_index_rejects_lowercase(self) -> None:
        with pytest.raises(ValueError, match="Invalid column"):
            column_index("a")

    def test_column_index_rejects_empty(self) -> None:
        with pytest.raises(ValueError):
            column_index("")


class TestFormatAddress:
    def test_origin(self) -> None:
        assert format_address(0, 0) == "A1"

    def test_row_is_one_based(self) -> None:
        assert format_address(1, 11) == "B12"

    def test_two_letter_column(self) -> None:
        assert format_address(51, 39) == "AZ40"

    def test_address_str(self) -> None:
        assert str(Address(2, 6)) == "C7"


class TestParseAddress:
    def test_simple(self) -> None:
        assert parse_address("A1") == (Address(0, 0), 2)

    def test_two_letter_column(self) -> None:
        assert parse_address("AZ40") == (Address(51, 39), 4)

    def test_aa_immediately_follows_z(self) -> None:
        z, _ = parse_address("Z1")
        aa, _ = parse_address("AA1")
        assert aa.column == z.column + 1

    def test_stops_at_first_non_matching_char(self) -> None:
        address, end = parse_address("B3+4")
        assert address == Address(1, 2)
        assert end == 2

    def test_parses_from_offset(self) -> None:
        address, end = parse_address("SUM(C5:D6)", 4)
        assert address == Address(2, 4)
        assert end == 6

    def test_row_zero_parses_to_negative_row(self) -> None:
        address, _ = parse_address("A0")
        assert address.row == -1

    @pytest.mark.parametrize("text", ["a1", "A", "1A", "", "12", "+A1", "Ab1"])
    def test_malformed_rejected(self, text: str) -> None:
        assert parse_address(text) is None

    def test_roundtrip_within_bounds(self) -> None:
        for col in range(60):
            for row in range(0, 120, 7):
                text = format_address(col, row)
                assert parse_address(text) == (Address(col, row), len(text))


class TestAddressFromText:
    def test_whole_string(self) -> None:
        assert address_from_text("C7") == Address(2, 6)

    def test_surrounding_whitespace_ignored(self) -> None:
        assert address_from_text("  C7 ") == Address(2, 6)

    def test_trailing_text_rejected(self) -> None:
        assert address_from_text("C7x") is None

    def test_lowercase_rejected(self) -> None:
        assert address_from_text("c7") is None
