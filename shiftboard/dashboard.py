"""
Dashboard-ready output functions.

These are the primary entry points for the Streamlit front end and the CLI
pipeline run. Each function returns plain dicts, DataFrames or display
strings suitable for rendering cards, charts and tables.
"""

import logging
import math
from datetime import date, datetime

from .kpis import classify_utilization, compute_summary, pick_today_or_latest, round1
from .loaders.sheets_api import sectors_for_summary
from .transforms import build_sector_summary_frame, build_series_frame

logger = logging.getLogger(__name__)


def get_summary_overview(
    sectors,
    state: dict[str, dict],
    now: datetime | date | None = None,
) -> dict:
    """Single entry point for the summary screen.

    Returns
    -------
    {
        "summary": compute_summary(...) dict,
        "rag": fleet utilization RAG,
        "sectors": DataFrame of per-sector snapshots with RAG,
        "errors": {sector_id: error message} for sectors flagged on the
                  last refresh,
    }
    """
    summary = compute_summary(sectors_for_summary(sectors, state), now)
    errors = {
        sector_id: s.get("error_msg") or "unknown failure"
        for sector_id, s in state.items()
        if s.get("has_error")
    }
    if errors:
        logger.warning("Summary built with %d failing sectors", len(errors))

    return {
        "summary": summary,
        "rag": classify_utilization(
            summary["utilization_percent"],
            summary["target_utilization_percent"],
            summary["min_utilization_percent"],
        ),
        "sectors": build_sector_summary_frame(summary),
        "errors": errors,
    }


def get_sector_view(
    sector: dict,
    state: dict[str, dict],
    now: datetime | date | None = None,
) -> dict:
    """Everything one sector screen needs: chart frame, current record, error."""
    sector_state = state.get(sector["id"]) or {}
    series = sector_state.get("series") or []
    current = pick_today_or_latest(series, now)

    return {
        "id": sector["id"],
        "name": sector["name"],
        "frame": build_series_frame(series),
        "current": current.as_dict() if current else None,
        "row_count": sector_state.get("row_count", len(series)),
        "error_msg": sector_state.get("error_msg", "") if sector_state.get("has_error") else "",
        "updated_at": sector_state.get("updated_at"),
    }


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------
def _to_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _split_seconds(minutes: float) -> tuple[int, int, int]:
    total_seconds = max(0, math.floor(minutes * 60 + 0.5))
    hours, rest = divmod(total_seconds, 3600)
    mins, secs = divmod(rest, 60)
    return hours, mins, secs


def format_minutes_as_hms(value) -> str:
    """Minutes -> "HH:MM:SS" (0.65 -> "00:00:39"); "-" when not a number."""
    minutes = _to_float(value)
    if minutes is None:
        return "-"
    hours, mins, secs = _split_seconds(minutes)
    return f"{hours:02d}:{mins:02d}:{secs:02d}"


def format_minutes_compact(value) -> str:
    """Minutes -> shortest of "HH:MM:SS", "MM:SS" or "Ns"."""
    minutes = _to_float(value)
    if minutes is None:
        return "-"
    hours, mins, secs = _split_seconds(minutes)
    if hours > 0:
        return f"{hours:02d}:{mins:02d}:{secs:02d}"
    if mins > 0:
        return f"{mins:02d}:{secs:02d}"
    return f"{secs}s"


def format_pieces(value) -> str:
    """Whole pieces with pt-BR thousands separators (12345 -> "12.345")."""
    n = _to_float(value) or 0.0
    return f"{math.floor(n + 0.5):,}".replace(",", ".")


def format_hours(value) -> str:
    n = _to_float(value) or 0.0
    return f"{round1(n):g}h"


def format_percent(value) -> str:
    n = _to_float(value)
    if n is None:
        return "-"
    return f"{round1(n):g}%"
