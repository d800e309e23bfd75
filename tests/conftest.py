"""
Shared fixtures: sample display tables, column maps and reference instants.
"""
from datetime import datetime, time

import openpyxl
import pytest

from shiftboard.config import DEFAULT_COLUMNS
from shiftboard.loaders.display_table import build_day_record


@pytest.fixture
def columns():
    """Column map of the first tenant."""
    return dict(DEFAULT_COLUMNS)


@pytest.fixture
def reference_now():
    """Mid-afternoon on the day the sample tables were exported."""
    return datetime(2026, 10, 19, 14, 30)


@pytest.fixture
def raw_table():
    """Newest-first display table as served by the sheet endpoint."""
    return {
        "headers": [
            "data", "Peças Fabric.", "Funcionando", "Parado",
            "utilização de Maquina", "TC MEDIO", "maximo", "minimo",
        ],
        "rows": [
            ["19/10/2026", "1.234", "07:30:00", "01:18:00", "85,2%", "00:00:39", "85%", "70%"],
            ["18/10/2026", "980", "06:00:00", "02:48:00", "68,2%", "", "85%", "70%"],
            ["17/10/2026", "", "", ""],
        ],
        "rowCount": 3,
        "ok": True,
    }


@pytest.fixture
def make_record():
    """Build a DayRecord from raw cells, e.g. make_record(date_cell="19/10/2026")."""
    return build_day_record


@pytest.fixture
def sheet_path(tmp_path):
    """The sample table exported to .xlsx, with native date and time cells."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Display"
    ws.append(["data", "Peças Fabric.", "Funcionando", "Parado",
               "utilização de Maquina", "TC MEDIO", "maximo", "minimo"])
    ws.append([datetime(2026, 10, 19), 1234, time(7, 30), time(1, 18),
               "85,2%", time(0, 0, 39), "85%", "70%"])
    ws.append([])
    ws.append(["18/10/2026", "980", "06:00:00", "02:48:00", "68,2%", None, "85%", "70%"])
    path = tmp_path / "costura.xlsx"
    wb.save(path)
    return path
