"""
Simulated display tables for demos and the Streamlit app.

Generates newest-first sector sheets written the way the live pt-BR sheets
are: "dd/mm/yyyy" dates, "1.234" piece counts, "HH:MM:SS" hours, "85,3%"
utilization and "00:00:39" cycle times. All values are synthetic.
"""

from datetime import date, datetime, timedelta

import numpy as np

from .config import DEFAULT_COLUMNS

# ---------------------------------------------------------------------------
# Typical sector parameters (realistic ranges)
# ---------------------------------------------------------------------------
_SECTOR_PARAMS = {
    "costura": {"name": "COSTURA", "shift_h": 8.8, "tc_s": 39, "target": 85, "minimum": 70},
    "corte": {"name": "CORTE", "shift_h": 8.8, "tc_s": 22, "target": 80, "minimum": 65},
    "acabamento": {"name": "ACABAMENTO", "shift_h": 8.0, "tc_s": 55, "target": 75, "minimum": 60},
}

_DEFAULT_PARAMS = {"name": None, "shift_h": 8.0, "tc_s": 45, "target": 80, "minimum": 65}


def _format_hms(hours: float) -> str:
    total = int(round(hours * 3600))
    h, rest = divmod(total, 3600)
    m, s = divmod(rest, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def _format_int_ptbr(value: float) -> str:
    return f"{int(round(value)):,}".replace(",", ".")


def _format_pct_ptbr(value: float) -> str:
    return f"{value:.1f}".replace(".", ",") + "%"


def generate_display_table(
    sector_id: str,
    days: int = 14,
    end: date | datetime | None = None,
    seed: int | None = None,
    columns: dict | None = None,
) -> dict:
    """Generate one sector's RawTable, newest day first.

    Parameters
    ----------
    sector_id : picks the sector's typical shift, cycle time and targets.
    days : number of daily rows.
    end : most recent day (defaults to today).
    seed : RNG seed for reproducible tables.
    columns : column map whose header names are used (DEFAULT_COLUMNS).
    """
    rng = np.random.default_rng(seed)
    params = _SECTOR_PARAMS.get(sector_id, _DEFAULT_PARAMS)
    columns = columns or DEFAULT_COLUMNS

    if end is None:
        end = date.today()
    if isinstance(end, datetime):
        end = end.date()

    keys = ["date", "pieces", "running", "stopped", "utilization", "tcMedio",
            "targetUtilization", "minimumUtilization"]
    keys = [k for k in keys if columns.get(k)]
    headers = [columns[k] for k in keys]

    rows = []
    for offset in range(days):
        day = end - timedelta(days=offset)
        utilization = float(np.clip(rng.normal(params["target"] - 5, 8), 20, 100))
        running_h = params["shift_h"] * utilization / 100
        stopped_h = params["shift_h"] - running_h
        tc_s = max(5.0, rng.normal(params["tc_s"], params["tc_s"] * 0.1))
        pieces = running_h * 3600 / tc_s

        values = {
            "date": day.strftime("%d/%m/%Y"),
            "pieces": _format_int_ptbr(pieces),
            "running": _format_hms(running_h),
            "stopped": _format_hms(stopped_h),
            "utilization": _format_pct_ptbr(utilization),
            "tcMedio": _format_hms(tc_s / 3600),
            "targetUtilization": _format_pct_ptbr(params["target"]),
            "minimumUtilization": _format_pct_ptbr(params["minimum"]),
        }
        rows.append([values[k] for k in keys])

    return {"headers": headers, "rows": rows, "rowCount": len(rows), "ok": True}


def generate_demo_sectors(sector_ids=None) -> list[dict]:
    """Sector definitions for a demo tenant (no real endpoints)."""
    sector_ids = sector_ids or list(_SECTOR_PARAMS)
    return [
        {
            "id": sector_id,
            "name": _SECTOR_PARAMS.get(sector_id, {}).get("name") or sector_id.upper(),
            "apiUrl": f"demo://{sector_id}",
        }
        for sector_id in sector_ids
    ]


def make_demo_fetch(days: int = 14, end: date | datetime | None = None, seed: int = 42):
    """Return a fetch callable serving simulated tables for demo:// URLs.

    Drop-in replacement for sheets_api.fetch_display_table.
    """
    def fetch(api_url: str, token=None, timeout=None) -> dict:
        sector_id = api_url.removeprefix("demo://")
        # Stable per-sector seed so refreshes are reproducible
        sector_seed = seed + sum(ord(c) for c in sector_id)
        return generate_display_table(sector_id, days=days, end=end, seed=sector_seed)

    return fetch
