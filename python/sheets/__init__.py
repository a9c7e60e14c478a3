"""sheets — a fixed-size grid of cells with forgiving formula evaluation.

Usage::

    from sheets import Grid

    grid = Grid()
    grid.set_text(0, 0, "10")
    grid.set_text(1, 0, "20")
    grid.set_text(2, 0, "=SUM(A1:A2)")
    grid.recalculate()
    print(grid.display_text(2, 0))  # "30"
"""

from sheets._address import (
    Address,
    address_from_text,
    column_index,
    column_letters,
    format_address,
    parse_address,
)
from sheets._cell import Cell
from sheets._config import SheetConfig
from sheets._errors import ConfigError, SheetsError
from sheets._grid import Grid
from sheets.calc import evaluate, recalculate

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Address",
    "Cell",
    "ConfigError",
    "Grid",
    "SheetConfig",
    "SheetsError",
    "address_from_text",
    "column_index",
    "column_letters",
    "evaluate",
    "format_address",
    "parse_address",
    "recalculate",
]
