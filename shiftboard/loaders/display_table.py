"""
Table parser for the per-sector "display table" served by the sheet endpoint.

Payload shape (one sector, one row per day, newest first):

    {"headers": ["data", "Peças Fabric.", ...],
     "rows": [["19/10/2026", "1.234", ...], ...],
     "rowCount": 30, "ok": true}

`ok: false` or an `error` field means the endpoint failed for that sector.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Sequence

from ..config import MALFORMED_TABLE_MESSAGE, SERVER_ERROR_MESSAGE
from ..errors import SectorDataError
from .columns import resolve_columns
from .utils import (
    cell_text,
    parse_cycle_time_minutes,
    parse_date_ptbr,
    parse_hours,
    parse_number_ptbr,
    parse_percent_ptbr,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayRecord:
    """Canonical form of one sheet row."""

    date: date | None
    date_str: str
    label: str
    pieces: float
    running_hours: float
    stopped_hours: float
    working_hours: float | None
    utilization_percent: float | None
    target_utilization_percent: float | None
    min_utilization_percent: float | None
    tc_medio_min_per_piece: float | None

    def as_dict(self) -> dict:
        return asdict(self)


def _cell(row: Sequence[Any], idx: int | None) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def build_day_record(
    date_cell: Any = None,
    pieces_cell: Any = None,
    running_cell: Any = None,
    stopped_cell: Any = None,
    working_cell: Any = None,
    utilization_cell: Any = None,
    target_cell: Any = None,
    minimum_cell: Any = None,
    tc_cell: Any = None,
) -> DayRecord:
    """Normalise one row's raw cells and apply the derived-field rules.

    - With a working-hours value, running hours are clamped to
      [0, working_hours] and stopped hours are what is left of the shift.
    - Without a readable cycle time, it is derived from running hours and
      pieces when both are positive.
    """
    date_str = cell_text(date_cell)
    pieces = max(0.0, parse_number_ptbr(pieces_cell) or 0.0)
    running_hours = parse_hours(running_cell) or 0.0
    working_hours = parse_hours(working_cell)

    if working_hours is not None:
        running_hours = min(max(running_hours, 0.0), working_hours)
        stopped_hours = working_hours - running_hours
    else:
        stopped_hours = parse_hours(stopped_cell) or 0.0

    tc_medio = parse_cycle_time_minutes(tc_cell)
    if tc_medio is None and pieces > 0 and running_hours > 0:
        tc_medio = running_hours * 60 / pieces

    return DayRecord(
        date=parse_date_ptbr(date_cell),
        date_str=date_str,
        label=date_str[:5],
        pieces=pieces,
        running_hours=running_hours,
        stopped_hours=stopped_hours,
        working_hours=working_hours,
        utilization_percent=parse_percent_ptbr(utilization_cell),
        target_utilization_percent=parse_percent_ptbr(target_cell),
        min_utilization_percent=parse_percent_ptbr(minimum_cell),
        tc_medio_min_per_piece=tc_medio,
    )


def check_payload(payload: dict | None) -> None:
    """Raise SectorDataError if the endpoint reported a failure."""
    if not isinstance(payload, dict):
        return
    if payload.get("ok") is False or payload.get("error"):
        raise SectorDataError(payload.get("error") or SERVER_ERROR_MESSAGE)


def parse_display_table(payload: dict | None, columns: dict | None) -> list[DayRecord]:
    """Parse one sector's RawTable into its daily series.

    Columns are resolved once for the whole table; rows are emitted in input
    order with no sorting, de-duplication or gap filling. An empty table
    yields an empty list.

    Raises
    ------
    SectorDataError
        If the payload carries `ok: false` or an `error` message,
        or its headers or rows are not lists.
    """
    check_payload(payload)
    if not isinstance(payload, dict):
        payload = {}
    headers = payload.get("headers") or []
    rows = payload.get("rows") or []
    if not isinstance(headers, (list, tuple)) or not isinstance(rows, (list, tuple)):
        raise SectorDataError(MALFORMED_TABLE_MESSAGE)

    idx = resolve_columns(headers, columns or {})

    series = []
    for row in rows:
        if not isinstance(row, (list, tuple)):
            row = ()
        series.append(build_day_record(
            date_cell=_cell(row, idx["date"]),
            pieces_cell=_cell(row, idx["pieces"]),
            running_cell=_cell(row, idx["running"]),
            stopped_cell=_cell(row, idx["stopped"]),
            working_cell=_cell(row, idx["workingHours"]),
            utilization_cell=_cell(row, idx["utilization"]),
            target_cell=_cell(row, idx["targetUtilization"]),
            minimum_cell=_cell(row, idx["minimumUtilization"]),
            tc_cell=_cell(row, idx["tcMedio"]),
        ))

    missing = [k for k in ("date", "pieces", "running") if idx[k] is None and (columns or {}).get(k)]
    if missing and series:
        logger.warning("Configured columns not found in sheet: %s", ", ".join(missing))

    logger.info("Parsed %d rows from display table", len(series))
    return series
