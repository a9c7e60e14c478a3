"""sheets.calc - Formula evaluation and recalculation for sheets grids."""

from sheets.calc._evaluator import classify, evaluate, recalculate
from sheets.calc._functions import FunctionRegistry, RangeValue, expand_range, resolve_range
from sheets.calc._parser import ExpressionParser, parse_literal, parse_number
from sheets.calc._protocol import CellDelta, CellKind, CellLookup, RecalcResult

__all__ = [
    "CellDelta",
    "CellKind",
    "CellLookup",
    "ExpressionParser",
    "FunctionRegistry",
    "RangeValue",
    "RecalcResult",
    "classify",
    "evaluate",
    "expand_range",
    "parse_literal",
    "parse_number",
    "recalculate",
    "resolve_range",
]
