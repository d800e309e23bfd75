"""
Tests for loading an exported sector sheet from .xlsx.
"""
from datetime import date, datetime, time, timedelta

import pytest

from shiftboard.loaders.display_table import parse_display_table
from shiftboard.loaders.sheets_api import refresh_sectors
from shiftboard.loaders.workbook import (
    load_display_table_xlsx,
    make_workbook_fetch,
    to_raw_cell,
    workbook_sectors,
)


class TestToRawCell:
    def test_dates_become_ptbr_text(self):
        assert to_raw_cell(datetime(2026, 10, 19, 8, 0)) == "19/10/2026"
        assert to_raw_cell(date(2026, 1, 2)) == "02/01/2026"

    def test_durations_become_hms(self):
        assert to_raw_cell(time(0, 0, 39)) == "00:00:39"
        assert to_raw_cell(timedelta(hours=26, minutes=5)) == "26:05:00"

    def test_other_values_pass_through(self):
        assert to_raw_cell("85%") == "85%"
        assert to_raw_cell(12) == 12


class TestLoadDisplayTableXlsx:
    def test_headers_and_rows(self, sheet_path):
        table = load_display_table_xlsx(str(sheet_path))
        assert table["headers"][0] == "data"
        assert table["rowCount"] == 2
        assert table["ok"] is True
        assert table["rows"][0][0] == "19/10/2026"
        assert table["rows"][0][2] == "07:30:00"

    def test_feeds_the_parser(self, sheet_path, columns):
        series = parse_display_table(load_display_table_xlsx(str(sheet_path)), columns)
        assert [r.date for r in series] == [date(2026, 10, 19), date(2026, 10, 18)]
        assert series[0].pieces == 1234
        assert series[0].running_hours == pytest.approx(7.5)
        assert series[0].tc_medio_min_per_piece == pytest.approx(0.65)
        assert series[1].tc_medio_min_per_piece == pytest.approx(6 * 60 / 980)

    def test_unknown_sheet_falls_back_to_first(self, sheet_path):
        table = load_display_table_xlsx(str(sheet_path), sheet_name="Nope")
        assert table["rowCount"] == 2


class TestWorkbookSectors:
    """Exported workbooks stand in for the live endpoint."""

    def test_sector_named_after_file(self, sheet_path):
        assert workbook_sectors([sheet_path]) == [
            {"id": "costura", "name": "COSTURA", "apiUrl": str(sheet_path)},
        ]

    def test_refresh_from_workbooks(self, sheet_path, tmp_path, columns):
        sectors = workbook_sectors([sheet_path, tmp_path / "corte.xlsx"])
        state = refresh_sectors(sectors, columns, fetch=make_workbook_fetch("Display"))

        assert state["costura"]["has_error"] is False
        assert state["costura"]["row_count"] == 2
        assert state["costura"]["series"][0].pieces == 1234
        # corte.xlsx was never written
        assert state["corte"]["has_error"] is True
