"""CellLookup protocol and recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sheets._address import Address


@runtime_checkable
class CellLookup(Protocol):
    """Resolves an address to ``(value, valid)``.

    Any callable with this shape works: ``Grid.lookup``, a bound
    ``dict.get`` wrapper, a test lambda.

    A lookup may also expose ``bounds``, a ``(rows, columns)`` pair.  Range
    aggregates then only resolve addresses inside it and count the rest of
    the range as 0 without visiting it.
    """

    def __call__(self, address: Address) -> tuple[float, bool]:
        ...


class CellKind(str, Enum):
    """How the recalculation pass classified a cell's text."""

    EMPTY = "empty"
    FORMULA = "formula"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class CellDelta:
    """A single cell's value change from recalculation."""

    row: int
    column: int
    old_value: float | None  # None when the cell had no valid value
    new_value: float | None


@dataclass(frozen=True)
class RecalcResult:
    """Summary of one full recalculation pass."""

    formula_cells: int = 0
    number_cells: int = 0
    text_cells: int = 0
    changed: tuple[CellDelta, ...] = ()

    @property
    def valued_cells(self) -> int:
        return self.formula_cells + self.number_cells
