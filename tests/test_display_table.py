"""
Tests for parsing a sector display table into its daily series.
"""
from datetime import date

import pytest

from shiftboard.errors import SectorDataError
from shiftboard.loaders.display_table import parse_display_table


class TestParseDisplayTable:
    """Row-by-row normalisation in sheet order."""

    def test_rows_in_input_order(self, raw_table, columns):
        series = parse_display_table(raw_table, columns)
        assert [r.date_str for r in series] == ["19/10/2026", "18/10/2026", "17/10/2026"]

    def test_first_row_fields(self, raw_table, columns):
        record = parse_display_table(raw_table, columns)[0]
        assert record.date == date(2026, 10, 19)
        assert record.label == "19/10"
        assert record.pieces == 1234
        assert record.running_hours == pytest.approx(7.5)
        assert record.stopped_hours == pytest.approx(1.3)
        assert record.working_hours is None
        assert record.utilization_percent == pytest.approx(85.2)
        assert record.target_utilization_percent == pytest.approx(85.0)
        assert record.min_utilization_percent == pytest.approx(70.0)
        assert record.tc_medio_min_per_piece == pytest.approx(0.65)

    def test_missing_cycle_time_is_derived(self, raw_table, columns):
        record = parse_display_table(raw_table, columns)[1]
        assert record.tc_medio_min_per_piece == pytest.approx(6 * 60 / 980)

    def test_short_row_degrades_to_defaults(self, raw_table, columns):
        record = parse_display_table(raw_table, columns)[2]
        assert record.pieces == 0
        assert record.running_hours == 0
        assert record.stopped_hours == 0
        assert record.utilization_percent is None
        assert record.target_utilization_percent is None
        assert record.tc_medio_min_per_piece is None

    def test_untracked_columns_are_none(self, raw_table):
        series = parse_display_table(raw_table, {"date": "data", "pieces": "Peças Fabric."})
        assert series[0].pieces == 1234
        assert series[0].utilization_percent is None
        assert series[0].running_hours == 0

    def test_empty_rows_yield_empty_series(self, columns):
        assert parse_display_table({"headers": ["data"], "rows": []}, columns) == []
        assert parse_display_table(None, columns) == []

    def test_parsing_is_idempotent(self, raw_table, columns):
        assert parse_display_table(raw_table, columns) == parse_display_table(raw_table, columns)


class TestServerErrors:
    def test_ok_false_uses_default_message(self, columns):
        with pytest.raises(SectorDataError, match="server_error"):
            parse_display_table({"ok": False, "headers": [], "rows": []}, columns)

    def test_error_field_message_is_kept(self, columns):
        with pytest.raises(SectorDataError, match="invalid token"):
            parse_display_table({"error": "invalid token"}, columns)

    @pytest.mark.parametrize("table", [
        {"headers": 5, "rows": [["x"]]},
        {"headers": ["data"], "rows": "19/10/2026"},
    ])
    def test_non_list_headers_or_rows(self, table, columns):
        with pytest.raises(SectorDataError, match="malformed display table"):
            parse_display_table(table, columns)


class TestDerivedFields:
    """Working-hours clamp and cycle-time fallback."""

    working_columns = {
        "date": "data",
        "pieces": "Peças",
        "running": "Funcionando",
        "stopped": "Parado",
        "workingHours": "Jornada",
    }
    headers = ["data", "Peças", "Funcionando", "Parado", "Jornada"]

    def test_running_over_shift_is_clamped(self):
        table = {"headers": self.headers, "rows": [["19/10/2026", "10", "9", "5", "8"]]}
        record = parse_display_table(table, self.working_columns)[0]
        assert record.working_hours == 8
        assert record.running_hours == 8
        assert record.stopped_hours == 0

    def test_stopped_is_derived_from_shift(self):
        table = {"headers": self.headers, "rows": [["19/10/2026", "10", "6:00", "0", "8:00"]]}
        record = parse_display_table(table, self.working_columns)[0]
        assert record.running_hours == pytest.approx(6.0)
        assert record.stopped_hours == pytest.approx(2.0)

    def test_cycle_time_fallback_from_pieces_and_hours(self, make_record):
        record = make_record(pieces_cell="100", running_cell="2")
        assert record.tc_medio_min_per_piece == pytest.approx(1.2)

    def test_no_fallback_without_pieces(self, make_record):
        record = make_record(pieces_cell="0", running_cell="2")
        assert record.tc_medio_min_per_piece is None
