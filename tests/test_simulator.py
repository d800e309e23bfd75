"""
Tests for the simulated sector tables.
"""
from datetime import date

import pytest

from shiftboard.kpis import compute_summary
from shiftboard.loaders.display_table import parse_display_table
from shiftboard.loaders.sheets_api import refresh_sectors, sectors_for_summary
from shiftboard.simulator import generate_demo_sectors, generate_display_table, make_demo_fetch


class TestGenerateDisplayTable:
    def test_newest_first_in_ptbr_formats(self, columns):
        table = generate_display_table("costura", days=5, end=date(2026, 10, 19), seed=1)
        assert table["rowCount"] == 5
        assert table["rows"][0][0] == "19/10/2026"
        assert table["rows"][-1][0] == "15/10/2026"

        series = parse_display_table(table, columns)
        assert [r.date for r in series][:2] == [date(2026, 10, 19), date(2026, 10, 18)]
        for record in series:
            assert record.pieces > 0
            assert record.running_hours + record.stopped_hours == pytest.approx(8.8, abs=1e-3)
            assert 20 <= record.utilization_percent <= 100
            assert record.tc_medio_min_per_piece > 0

    def test_seed_is_reproducible(self):
        a = generate_display_table("corte", days=3, end=date(2026, 10, 19), seed=7)
        b = generate_display_table("corte", days=3, end=date(2026, 10, 19), seed=7)
        assert a == b


class TestDemoPipeline:
    def test_demo_sectors_summarise_end_to_end(self, columns):
        sectors = generate_demo_sectors()
        fetch = make_demo_fetch(days=7, end=date(2026, 10, 19))
        state = refresh_sectors(sectors, columns, fetch=fetch)

        summary = compute_summary(sectors_for_summary(sectors, state), date(2026, 10, 19))
        assert not any(s["has_error"] for s in state.values())
        assert summary["date_str"] == "19/10/2026"
        assert summary["utilization_percent"] is not None
        assert summary["target_utilization_percent"] is not None
        assert len(summary["per_sector"]) == len(sectors)
