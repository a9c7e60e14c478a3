"""Range aggregate functions: SUM, AVG, MIN, MAX."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from sheets._address import Address

if TYPE_CHECKING:
    from sheets.calc._protocol import CellLookup


# ---------------------------------------------------------------------------
# Range expansion
# ---------------------------------------------------------------------------


@dataclass
class RangeValue:
    """Resolved values of a range, clipped to the cells the lookup can resolve.

    ``values`` holds the cells inside the lookup's bounds in row-major
    order, unresolved ones as 0.  ``outside`` counts the rest of the
    rectangle; those cells are 0 too but are never materialized, so a range
    typed as ``A1:A99999999`` costs no more than the grid it is read from.

    Iterable and sized over ``values`` for functions that expect lists.
    """

    values: list[float]
    outside: int = 0

    @property
    def size(self) -> int:
        """Number of cells in the whole rectangle."""
        return len(self.values) + self.outside

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


Aggregate = Callable[[RangeValue], float]


def expand_range(start: Address, end: Address) -> Iterator[Address]:
    """Addresses of the rectangle *start*..*end*, row-major, both ends inclusive.

    The corners are not reordered: if *end* lies before *start* on either
    axis the rectangle is empty.
    """
    for row in range(start.row, end.row + 1):
        for col in range(start.column, end.column + 1):
            yield Address(col, row)


def resolve_range(start: Address, end: Address, lookup: CellLookup) -> RangeValue:
    """Resolve every cell of the range; unresolved cells count as 0.

    When *lookup* exposes ``bounds`` (``(rows, columns)``), only the part of
    the rectangle inside them is visited and the remainder is counted.
    """
    size = max(0, end.row - start.row + 1) * max(0, end.column - start.column + 1)
    first, last = start, end
    bounds = getattr(lookup, "bounds", None)
    if bounds is not None:
        rows, columns = bounds
        first = Address(max(start.column, 0), max(start.row, 0))
        last = Address(min(end.column, columns - 1), min(end.row, rows - 1))

    values: list[float] = []
    for address in expand_range(first, last):
        value, ok = lookup(address)
        values.append(value if ok else 0.0)
    return RangeValue(values, size - len(values))


# ---------------------------------------------------------------------------
# Builtin aggregates.  Each takes the resolved values of a range.
# ---------------------------------------------------------------------------


def _builtin_sum(values: RangeValue) -> float:
    total = 0.0
    for v in values:
        total += v
    return total


def _builtin_avg(values: RangeValue) -> float:
    total = _builtin_sum(values)
    if values.size:
        try:
            divisor = float(values.size)
        except OverflowError:
            divisor = math.inf
        total /= divisor
    return total


def _builtin_min(values: RangeValue) -> float:
    # Empty range stays at +inf.
    result = math.inf
    for v in values:
        if v < result:
            result = v
    if values.outside and 0.0 < result:
        result = 0.0
    return result


def _builtin_max(values: RangeValue) -> float:
    # Empty range stays at -inf.
    result = -math.inf
    for v in values:
        if v > result:
            result = v
    if values.outside and 0.0 > result:
        result = 0.0
    return result


_BUILTINS: dict[str, Aggregate] = {
    "SUM": _builtin_sum,
    "AVG": _builtin_avg,
    "MIN": _builtin_min,
    "MAX": _builtin_max,
}


class FunctionRegistry:
    """Registry of range aggregate implementations.

    Starts with the builtins and can be extended.  Names that are not
    registered fall back to summing, so ``TOTAL(A1:A3)`` behaves like
    ``SUM(A1:A3)``.
    """

    fallback = "SUM"

    def __init__(self) -> None:
        self._functions: dict[str, Aggregate] = dict(_BUILTINS)

    def register(self, name: str, func: Aggregate) -> None:
        self._functions[name] = func

    def get(self, name: str) -> Aggregate | None:
        return self._functions.get(name)

    def has(self, name: str) -> bool:
        return name in self._functions

    def resolve(self, name: str) -> Aggregate:
        """The aggregate for *name*, or the fallback when it is not registered."""
        func = self.get(name)
        if func is None:
            return self._functions[self.fallback]
        return func

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())
