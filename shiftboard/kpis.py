"""
KPI computation functions — pure functions with no side effects.

Provides the "today or latest" snapshot selection, the fleet summary with
hours-weighted utilization, and utilization RAG classification.
"""

import logging
import math
from datetime import date, datetime

from .config import UTILIZATION_RAG_AMBER_BAND
from .loaders.display_table import DayRecord

logger = logging.getLogger(__name__)

_WEIGHTED_METRICS = (
    "utilization_percent",
    "target_utilization_percent",
    "min_utilization_percent",
)


def round1(value: float) -> float:
    """Round half up to one decimal place (12.25 -> 12.3)."""
    return math.floor(value * 10 + 0.5) / 10


def _is_finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _calendar_date(now: datetime | date | None) -> date:
    if now is None:
        now = datetime.now()
    if isinstance(now, datetime):
        return now.date()
    return now


def pick_today_or_latest(
    series: list[DayRecord] | None,
    now: datetime | date | None = None,
) -> DayRecord | None:
    """Return today's record, else the first record, else None.

    Only the calendar date of `now` is compared. Sheets are delivered newest
    first, so the first record stands in for "latest" when today is missing.
    """
    if not series:
        return None

    today = _calendar_date(now)
    for record in series:
        if record.date is not None and record.date == today:
            return record
    return series[0]


def compute_sector_snapshot(
    series: list[DayRecord] | None,
    now: datetime | date | None = None,
) -> dict:
    """Snapshot fields of the record picked for a sector.

    A sector without records gets zero counts and None rates.
    """
    record = pick_today_or_latest(series, now)
    if record is None:
        return {
            "pieces": 0,
            "running_hours": 0.0,
            "stopped_hours": 0.0,
            "utilization_percent": None,
            "target_utilization_percent": None,
            "min_utilization_percent": None,
            "tc_medio_min_per_piece": None,
            "date_str": "",
        }

    return {
        "pieces": record.pieces or 0,
        "running_hours": record.running_hours or 0.0,
        "stopped_hours": record.stopped_hours or 0.0,
        "utilization_percent": record.utilization_percent,
        "target_utilization_percent": record.target_utilization_percent,
        "min_utilization_percent": record.min_utilization_percent,
        "tc_medio_min_per_piece": record.tc_medio_min_per_piece,
        "date_str": record.date_str or "",
    }


def _weighted_average(per_sector: list[dict], field: str) -> float | None:
    weighted_sum, total_weight = 0.0, 0.0
    for snap in per_sector:
        value = snap[field]
        weight = snap["total_hours"] or 0
        if not _is_finite(value) or not weight:
            continue
        weighted_sum += value * weight
        total_weight += weight
    if total_weight <= 0:
        return None
    return round1(weighted_sum / total_weight)


def compute_summary(sectors, now: datetime | date | None = None) -> dict:
    """Aggregate every sector's snapshot into the fleet summary.

    Parameters
    ----------
    sectors : sequence of {"id", "name", "series"} dicts. A missing series
        counts as empty; the sector still appears in `per_sector`.
    now : reference instant for "today" (defaults to now).

    Returns
    -------
    {
        "per_sector": [{"id", "name", ...snapshot, "total_hours"}],
        "totals": {"pieces", "running_hours", "stopped_hours", "total_hours"},
        "utilization_percent": ...,         # hours-weighted
        "target_utilization_percent": ...,  # hours-weighted
        "min_utilization_percent": ...,     # hours-weighted
        "tc_medio_avg_min_per_piece": ...,  # plain mean
        "date_str": "dd/mm/yyyy",
    }
    Averages are None when no sector contributes to them.
    """
    per_sector = []
    for sector in sectors:
        snap = compute_sector_snapshot(sector.get("series"), now)
        per_sector.append({
            "id": sector.get("id"),
            "name": sector.get("name"),
            **snap,
            "total_hours": snap["running_hours"] + snap["stopped_hours"],
        })

    totals = {"pieces": 0, "running_hours": 0.0, "stopped_hours": 0.0, "total_hours": 0.0}
    for snap in per_sector:
        for key in totals:
            totals[key] += snap[key] or 0

    summary: dict = {"per_sector": per_sector, "totals": totals}
    for field in _WEIGHTED_METRICS:
        summary[field] = _weighted_average(per_sector, field)

    tc_values = [s["tc_medio_min_per_piece"] for s in per_sector if _is_finite(s["tc_medio_min_per_piece"])]
    summary["tc_medio_avg_min_per_piece"] = (
        round1(sum(tc_values) / len(tc_values)) if tc_values else None
    )

    summary["date_str"] = next((s["date_str"] for s in per_sector if s["date_str"]), "")

    logger.debug("Summarised %d sectors for %s", len(per_sector), summary["date_str"] or "no date")
    return summary


def classify_utilization(
    actual: float | None,
    target: float | None,
    minimum: float | None = None,
    amber_band: float = UTILIZATION_RAG_AMBER_BAND,
) -> str:
    """Return 'green', 'amber', 'red' or 'grey' for a utilization reading.

    Logic
    -----
    green  if actual >= target
    amber  if actual >= minimum (or >= target - amber_band without a minimum)
    red    otherwise
    grey   if actual or target is missing
    """
    if not _is_finite(actual) or not _is_finite(target):
        return "grey"

    if actual >= target:
        return "green"
    threshold = minimum if _is_finite(minimum) else target - amber_band
    if actual >= threshold:
        return "amber"
    return "red"
