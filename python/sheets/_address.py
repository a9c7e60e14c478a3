"""Address codec: ``"A1"`` / ``"AZ40"`` <-> zero-based (column, row) pairs.

Column letters are bijective base-26 (A=1 ... Z=26, AA=27), so there is no
"zero" letter and two-letter columns continue directly after Z.  Row numbers
are 1-based in text and 0-based everywhere else.

Parsing here is purely syntactic.  ``A0`` parses to row ``-1``; whether an
address lies inside a grid is the grid's business.
"""

from __future__ import annotations

from typing import NamedTuple


class Address(NamedTuple):
    """Zero-based cell position. Note the (column, row) order."""

    column: int
    row: int

    def __str__(self) -> str:
        return format_address(self.column, self.row)


def _is_letter(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def column_index(letters: str) -> int:
    """A->0, B->1, ..., Z->25, AA->26."""
    n = 0
    for ch in letters:
        if not _is_letter(ch):
            raise ValueError(f"Invalid column letters: {letters!r}")
        n = n * 26 + (ord(ch) - ord("A") + 1)
    if n == 0:
        raise ValueError("Empty column letters")
    return n - 1


def column_letters(index: int) -> str:
    """0->A, 1->B, ..., 25->Z, 26->AA."""
    if index < 0:
        raise ValueError(f"Negative column index: {index}")
    result = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        result = chr(rem + ord("A")) + result
    return result


def format_address(column: int, row: int) -> str:
    """Format a zero-based (column, row) pair as ``"B3"``-style text."""
    return f"{column_letters(column)}{row + 1}"


def parse_address(text: str, pos: int = 0) -> tuple[Address, int] | None:
    """Read an address starting at *text[pos]*.

    Consumes uppercase letters then digits and stops at the first character
    that fits neither.  Returns ``(address, end)`` where *end* is the index
    just past the consumed text, or ``None`` if no letter or no digit was
    found.  Lowercase letters never match.
    """
    i = pos
    length = len(text)
    col = 0
    while i < length and _is_letter(text[i]):
        col = col * 26 + (ord(text[i]) - ord("A") + 1)
        i += 1
    if i == pos:
        return None

    digits_start = i
    row = 0
    while i < length and _is_digit(text[i]):
        row = row * 10 + (ord(text[i]) - ord("0"))
        i += 1
    if i == digits_start:
        return None

    return Address(col - 1, row - 1), i


def address_from_text(text: str) -> Address | None:
    """Strict whole-string parse, e.g. for a "go to cell" command.

    Surrounding whitespace is ignored; anything else after the digits makes
    the text invalid.
    """
    stripped = text.strip()
    parsed = parse_address(stripped)
    if parsed is None:
        return None
    address, end = parsed
    if end != len(stripped):
        return None
    return address
