"""Formula parser that evaluates while it parses.

Grammar::

    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary)*
    unary      := '-' unary | atom
    atom       := number | address | NAME '(' address ':' address ')' | '(' expression ')'

No tree is built: the parser folds values as it goes.  An open parenthesis
pushes the enclosing expression's partial state onto an explicit stack
instead of recursing, so nesting depth is limited only by the text length.

The parser is forgiving by construction.  Anything it cannot make sense of
at atom position is skipped one character at a time and counts as 0, and
parsing simply stops at the first character that cannot continue the
expression.
"""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING

from sheets._address import parse_address
from sheets.calc._functions import FunctionRegistry, resolve_range

if TYPE_CHECKING:
    from sheets.calc._protocol import CellLookup

logger = logging.getLogger(__name__)

# Numeric literal: optional sign, then a decimal or hexadecimal float, or
# inf / infinity / nan.  Matched case-insensitively.
NUMBER_PATTERN = (
    r"[+-]?(?:"
    r"0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?"
    r"|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?"
    r"|inf(?:inity)?"
    r"|nan(?:\([0-9a-z_]*\))?"
    r")"
)

# Leading whitespace of any kind is allowed before a literal.
_NUMBER_RE = re.compile(r"[ \t\n\r\f\v]*(" + NUMBER_PATTERN + ")", re.IGNORECASE)

_BLANKS = " \t"

# Function names are read greedily up to this many letters.
MAX_NAME_LENGTH = 7


def _is_upper(ch: str) -> bool:
    return "A" <= ch <= "Z"


def _literal_value(literal: str) -> float:
    negative = literal.startswith("-")
    body = literal.lstrip("+-")
    lowered = body.lower()
    if lowered.startswith("0x"):
        try:
            value = float.fromhex(body)
        except OverflowError:
            value = math.inf
    elif lowered.startswith("nan"):
        value = math.nan
    else:
        value = float(body)
    return -value if negative else value


def parse_number(text: str, pos: int = 0) -> tuple[float, int] | None:
    """Read a numeric literal at *text[pos]*, returning ``(value, end)``."""
    m = _NUMBER_RE.match(text, pos)
    if m is None:
        return None
    return _literal_value(m.group(1)), m.end()


def parse_literal(text: str) -> float | None:
    """Value of *text* if the whole of it is one numeric literal, else None."""
    m = _NUMBER_RE.fullmatch(text)
    if m is None:
        return None
    return _literal_value(m.group(1))


class _Frame:
    """One expression level: the sum so far and the term being multiplied out."""

    __slots__ = ("total", "add_op", "product", "mul_op", "negate")

    def __init__(self) -> None:
        self.total = 0.0
        self.add_op = ""
        self.product = 0.0
        self.mul_op = ""
        # Sign for the parenthesized group this frame is waiting on.
        self.negate = False

    def apply_factor(self, value: float) -> None:
        if self.mul_op == "*":
            self.product *= value
        elif self.mul_op == "/":
            self.product = self.product / value if value != 0 else 0.0
        else:
            self.product = value
        self.mul_op = ""

    def end_term(self) -> None:
        if self.add_op == "+":
            self.total += self.product
        elif self.add_op == "-":
            self.total -= self.product
        else:
            self.total = self.product
        self.add_op = ""


class ExpressionParser:
    """Single-use parser over one formula body (without the leading ``=``)."""

    __slots__ = ("_text", "_pos", "_lookup", "_functions")

    def __init__(
        self,
        text: str,
        lookup: CellLookup,
        functions: FunctionRegistry | None = None,
    ) -> None:
        self._text = text
        self._pos = 0
        self._lookup = lookup
        self._functions = functions if functions is not None else FunctionRegistry()

    @property
    def position(self) -> int:
        """Index of the first character not consumed so far."""
        return self._pos

    def parse(self) -> float:
        self._pos = 0
        stack: list[_Frame] = []
        frame = _Frame()
        while True:
            # Operand position: a chain of unary minuses, then '(' or an atom.
            negate = False
            self._skip_blanks()
            while self._peek() == "-":
                self._pos += 1
                negate = not negate
                self._skip_blanks()
            if self._peek() == "(":
                self._pos += 1
                frame.negate = negate
                stack.append(frame)
                frame = _Frame()
                continue
            value = self._atom()

            # Operator position.  A closed group re-enters here with its value.
            while True:
                frame.apply_factor(-value if negate else value)
                self._skip_blanks()
                ch = self._peek()
                if ch == "*" or ch == "/":
                    self._pos += 1
                    frame.mul_op = ch
                    break
                frame.end_term()
                if ch == "+" or ch == "-":
                    self._pos += 1
                    frame.add_op = ch
                    break
                if not stack:
                    return frame.total
                # A missing ')' is tolerated.
                if ch == ")":
                    self._pos += 1
                value = frame.total
                frame = stack.pop()
                negate = frame.negate

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        i = self._pos + offset
        if i < len(self._text):
            return self._text[i]
        return ""

    def _skip_blanks(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos] in _BLANKS:
            self._pos += 1

    # ------------------------------------------------------------------
    # Atoms
    # ------------------------------------------------------------------

    def _atom(self) -> float:
        ch = self._peek()

        # Three capitals in a row may start a function call.
        if _is_upper(ch) and _is_upper(self._peek(1)) and _is_upper(self._peek(2)):
            value = self._function_call()
            if value is not None:
                return value

        parsed = parse_address(self._text, self._pos)
        if parsed is not None:
            address, self._pos = parsed
            value, ok = self._lookup(address)
            return value if ok else 0.0

        number = parse_number(self._text, self._pos)
        if number is not None:
            value, self._pos = number
            return value

        if self._pos < len(self._text):
            logger.debug(
                "Skipping %r at offset %d in %r", self._text[self._pos], self._pos, self._text
            )
            self._pos += 1
        return 0.0

    def _function_call(self) -> float | None:
        """Parse ``NAME(start:end)``.

        Returns None after rewinding when the name is not followed by ``(``,
        so the caller can re-read the same text as an address.
        """
        start = self._pos
        text = self._text
        end = start
        while end < len(text) and end - start < MAX_NAME_LENGTH and _is_upper(text[end]):
            end += 1
        name = text[start:end]
        self._pos = end

        self._skip_blanks()
        if self._peek() != "(":
            self._pos = start
            return None
        self._pos += 1

        self._skip_blanks()
        first = parse_address(text, self._pos)
        if first is not None:
            top_left, self._pos = first
            self._skip_blanks()
            if self._peek() == ":":
                self._pos += 1
                self._skip_blanks()
                second = parse_address(text, self._pos)
                if second is not None:
                    bottom_right, self._pos = second
                    self._skip_blanks()
                    if self._peek() == ")":
                        self._pos += 1
                    values = resolve_range(top_left, bottom_right, self._lookup)
                    return self._functions.resolve(name)(values)

        logger.debug("Malformed arguments to %s in %r", name, text)
        if self._peek() == ")":
            self._pos += 1
        return 0.0
