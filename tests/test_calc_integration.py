"""Integration tests: load records, recalculate, display, save records."""

from __future__ import annotations

import pytest

import sheets
from sheets import Grid, SheetConfig

# ---------------------------------------------------------------------------
# Golden grid builders
# ---------------------------------------------------------------------------


def _build_budget() -> Grid:
    """Two columns of figures with totals and an average underneath."""
    grid = Grid(SheetConfig(rows=20, columns=6))
    grid.load_records([
        ["Item", "Q1", "Q2"],
        ["Rent", "1200", "1200"],
        ["Power", "310.5", "295"],
        ["Water", "", "80"],
        ["Total", "=SUM(B2:B4)", "=SUM(C2:C4)"],
        ["Mean", "=AVG(B2:B4)", "=AVG(C2:C4)"],
        ["Swing", "=MAX(B2:C4)-MIN(B2:C4)"],
    ])
    return grid


class TestBudget:
    def test_totals(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        assert grid.display_text(4, 1) == "1510.5"
        assert grid.display_text(4, 2) == "1575"

    def test_average_counts_blank_cells(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        assert grid.get(5, 1).value == pytest.approx(1510.5 / 3)
        assert grid.get(5, 2).value == 525

    def test_swing_includes_blank_as_zero(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        # B4 is blank, so MIN over the block is 0.
        assert grid.get(6, 1).value == 1200

    def test_labels_displayed_as_text(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        assert grid.display_text(0, 0) == "Item"
        assert grid.display_text(3, 1) == ""

    def test_edit_then_recalculate(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        grid.set_text(3, 1, "90")
        assert grid.is_dirty
        grid.recalculate()
        assert grid.display_text(4, 1) == "1600.5"

    def test_save_records_keep_formulas(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        rows = list(grid.records())
        assert rows[4] == ["Total", "=SUM(B2:B4)", "=SUM(C2:C4)"]
        assert rows[6] == ["Swing", "=MAX(B2:C4)-MIN(B2:C4)"]
        assert len(rows) == 7


class TestNavigation:
    def test_locate_and_format(self) -> None:
        grid = _build_budget()
        row, col = grid.locate("C5")
        assert sheets.format_address(col, row) == "C5"
        assert grid.get(row, col).text == "=SUM(C2:C4)"

    def test_locate_outside_grid(self) -> None:
        assert _build_budget().locate("G1") is None


class TestTopLevelApi:
    def test_evaluate_with_grid_lookup(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        assert sheets.evaluate("B2*2", grid.lookup) == 2400

    def test_recalculate_function(self) -> None:
        grid = _build_budget()
        result = sheets.recalculate(grid)
        assert result.formula_cells == 5

    def test_huge_range_with_grid_lookup(self) -> None:
        grid = _build_budget()
        grid.recalculate()
        # C2:C4 plus the total and mean underneath.
        assert sheets.evaluate("SUM(C2:C99999999999)", grid.lookup) == 3675
