"""Formula evaluation entry point and the full-grid recalculation pass.

``evaluate`` never raises for any formula text: malformed syntax, division
by zero and unresolved references all come out as 0, and any nesting depth
that fits in the text is evaluated.

``recalculate`` walks the grid once in row-major order.  There is no
dependency ordering, so a formula that reads a cell *later* in that order
sees the value the cell had before this pass started, while cells earlier in
the order are already fresh.  Run the pass again to settle forward
references::

    grid.set_text(0, 0, "=A2*2")   # A1 reads A2, which comes later
    grid.set_text(1, 0, "5")
    recalculate(grid)              # A1 == 0  (A2 had no value yet)
    recalculate(grid)              # A1 == 10
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from sheets.calc._functions import FunctionRegistry
from sheets.calc._parser import ExpressionParser, parse_literal
from sheets.calc._protocol import CellDelta, CellKind, RecalcResult

if TYPE_CHECKING:
    from sheets._grid import Grid
    from sheets.calc._protocol import CellLookup

logger = logging.getLogger(__name__)

FORMULA_MARKER = "="


def evaluate(
    formula: str,
    lookup: CellLookup,
    functions: FunctionRegistry | None = None,
) -> float:
    """Evaluate a formula body (no leading ``=``) to a float.

    *lookup* maps an :class:`~sheets.Address` to ``(value, valid)``.
    """
    return ExpressionParser(formula, lookup, functions).parse()


def _classify(text: str) -> tuple[CellKind, float]:
    if not text:
        return CellKind.EMPTY, 0.0
    if text.startswith(FORMULA_MARKER):
        return CellKind.FORMULA, 0.0
    literal = parse_literal(text)
    if literal is not None:
        return CellKind.NUMBER, literal
    return CellKind.TEXT, 0.0


def classify(text: str) -> CellKind:
    """Classify raw cell text the way the recalculation pass does.

    Text is a number literal when the whole of it is one literal, optionally
    preceded by whitespace: ``42``, ``-1.5e3``, ``0x1F``, ``inf``, ``NaN``.
    """
    return _classify(text)[0]


def _values_differ(old: float | None, new: float | None) -> bool:
    if old is None or new is None:
        return old is not new
    if math.isnan(old) and math.isnan(new):
        return False
    return old != new


def recalculate(grid: Grid, functions: FunctionRegistry | None = None) -> RecalcResult:
    """Refresh every cell's cached value and validity flag in one pass."""
    if functions is None:
        functions = FunctionRegistry()
    lookup = grid.lookup

    counts = {CellKind.FORMULA: 0, CellKind.NUMBER: 0, CellKind.TEXT: 0}
    deltas: list[CellDelta] = []

    for row, col, cell in grid.iter_cells():
        old = cell.value if cell.has_value else None
        kind, literal = _classify(cell.text)

        if kind is CellKind.EMPTY or kind is CellKind.TEXT:
            cell.value = 0.0
            cell.has_value = False
        elif kind is CellKind.FORMULA:
            cell.value = evaluate(cell.text[len(FORMULA_MARKER):], lookup, functions)
            cell.has_value = True
        else:
            cell.value = literal
            cell.has_value = True

        if kind is not CellKind.EMPTY:
            counts[kind] += 1

        new = cell.value if cell.has_value else None
        if _values_differ(old, new):
            deltas.append(CellDelta(row=row, column=col, old_value=old, new_value=new))

    result = RecalcResult(
        formula_cells=counts[CellKind.FORMULA],
        number_cells=counts[CellKind.NUMBER],
        text_cells=counts[CellKind.TEXT],
        changed=tuple(deltas),
    )
    logger.debug(
        "Recalculated %dx%d grid: %d formulas, %d numbers, %d text, %d changed",
        grid.rows, grid.columns,
        result.formula_cells, result.number_cells, result.text_cells, len(deltas),
    )
    return result
