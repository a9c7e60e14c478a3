"""Cell — raw text plus the numeric value cached by the last recalculation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cell:
    """A single grid cell.

    ``value`` is only meaningful while ``has_value`` is True.  Both are
    derived from ``text`` by the recalculation pass.
    """

    text: str = ""
    value: float = 0.0
    has_value: bool = False

    @property
    def is_blank(self) -> bool:
        return self.text == ""

    def reset(self) -> None:
        self.text = ""
        self.value = 0.0
        self.has_value = False
