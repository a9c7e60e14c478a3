"""Grid — dense, fixed-size cell store with a modified flag.

The grid only stores text and cached values.  It never recalculates on its
own; call :meth:`Grid.recalculate` (or :func:`sheets.calc.recalculate`)
after edits that formulas should see.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from sheets._address import Address, address_from_text
from sheets._cell import Cell
from sheets._config import SheetConfig

if TYPE_CHECKING:
    from sheets.calc._protocol import RecalcResult

logger = logging.getLogger(__name__)


class GridLookup:
    """Address resolver bound to one grid.

    Addresses outside the grid are invalid rather than an error.  ``bounds``
    lets range aggregates skip the part of a range the grid does not cover.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Grid) -> None:
        self._grid = grid

    @property
    def bounds(self) -> tuple[int, int]:
        return self._grid.rows, self._grid.columns

    def __call__(self, address: Address) -> tuple[float, bool]:
        return self._grid._resolve(address)


class Grid:
    """``rows x columns`` cells addressed by zero-based (row, column)."""

    __slots__ = ("_config", "_rows", "_columns", "_cells", "_dirty")

    def __init__(self, config: SheetConfig | None = None) -> None:
        self._config = config if config is not None else SheetConfig()
        self._rows = self._config.rows
        self._columns = self._config.columns
        # Flat row-major storage: cells[row * columns + col]
        self._cells: list[Cell] = [Cell() for _ in range(self._rows * self._columns)]
        self._dirty = False

    @property
    def config(self) -> SheetConfig:
        return self._config

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._columns

    def _index(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexError(
                f"Cell ({row}, {col}) outside {self._rows}x{self._columns} grid"
            )
        return row * self._columns + col

    def get(self, row: int, col: int) -> Cell:
        return self._cells[self._index(row, col)]

    def set_text(self, row: int, col: int, text: str) -> None:
        """Overwrite a cell's raw text and invalidate its cached value."""
        cell = self._cells[self._index(row, col)]
        cell.text = text[: self._config.max_text_length]
        cell.value = 0.0
        cell.has_value = False
        self._dirty = True

    def clear(self, row: int, col: int) -> None:
        self._cells[self._index(row, col)].reset()
        self._dirty = True

    def iter_cells(self) -> Iterator[tuple[int, int, Cell]]:
        """Yield ``(row, col, cell)`` in row-major order."""
        cols = self._columns
        for i, cell in enumerate(self._cells):
            row, col = divmod(i, cols)
            yield row, col, cell

    # ------------------------------------------------------------------
    # Modified flag
    # ------------------------------------------------------------------

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def mark_clean(self) -> None:
        self._dirty = False

    # ------------------------------------------------------------------
    # Formula lookup capability
    # ------------------------------------------------------------------

    @property
    def lookup(self) -> GridLookup:
        """Callable resolving an address to ``(value, valid)`` for the evaluator."""
        return GridLookup(self)

    def _resolve(self, address: Address) -> tuple[float, bool]:
        col, row = address
        if not self.in_bounds(row, col):
            return 0.0, False
        cell = self._cells[row * self._columns + col]
        return cell.value, cell.has_value

    def locate(self, text: str) -> tuple[int, int] | None:
        """Turn ``"C7"`` into ``(row, col)``, or None if invalid or out of bounds."""
        address = address_from_text(text)
        if address is None or not self.in_bounds(address.row, address.column):
            return None
        return address.row, address.column

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display_text(self, row: int, col: int) -> str:
        """Text shown for a cell: its value if it has one, else the raw text."""
        cell = self.get(row, col)
        if cell.is_blank:
            return ""
        if cell.has_value:
            return f"{cell.value:g}"
        return cell.text

    # ------------------------------------------------------------------
    # Record-level load/save support
    # ------------------------------------------------------------------

    def row_extent(self, row: int) -> int:
        """Columns up to and including the row's last non-blank cell."""
        start = self._index(row, 0)
        for col in range(self._columns - 1, -1, -1):
            if self._cells[start + col].text:
                return col + 1
        return 0

    def extent(self) -> int:
        """Rows up to and including the last row holding any text."""
        for row in range(self._rows - 1, -1, -1):
            if self.row_extent(row):
                return row + 1
        return 0

    def records(self) -> Iterator[list[str]]:
        """Yield raw cell text row by row, without trailing blank fields or rows."""
        for row in range(self.extent()):
            start = row * self._columns
            width = self.row_extent(row)
            yield [c.text for c in self._cells[start : start + width]]

    def load_records(self, records: Iterable[Iterable[str]]) -> None:
        """Populate cells from row-major records of raw text.

        Blank fields are skipped.  Rows and fields beyond the grid's capacity
        are dropped.  The grid is clean afterwards; nothing is recalculated.
        """
        for row, fields in enumerate(records):
            if row >= self._rows:
                logger.debug("Dropping records past row %d", self._rows)
                break
            for col, text in enumerate(fields):
                if col >= self._columns:
                    logger.debug("Dropping fields past column %d in row %d", self._columns, row + 1)
                    break
                if text:
                    self.set_text(row, col, text)
        self._dirty = False

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def recalculate(self) -> RecalcResult:
        """Run one full recalculation pass over this grid."""
        from sheets.calc._evaluator import recalculate

        return recalculate(self)

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else "clean"
        return f"<Grid {self._rows}x{self._columns} [{state}]>"
