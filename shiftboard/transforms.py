"""
Data transforms: shape parsed series and summaries into DataFrames for
charting and tables.
"""

import logging

import pandas as pd

from .kpis import classify_utilization
from .loaders.display_table import DayRecord

logger = logging.getLogger(__name__)

SERIES_COLUMNS = [
    "date",
    "date_str",
    "label",
    "pieces",
    "running_hours",
    "stopped_hours",
    "working_hours",
    "utilization_percent",
    "target_utilization_percent",
    "min_utilization_percent",
    "tc_medio_min_per_piece",
]

SECTOR_SUMMARY_COLUMNS = [
    "id",
    "name",
    "date_str",
    "pieces",
    "running_hours",
    "stopped_hours",
    "total_hours",
    "utilization_percent",
    "target_utilization_percent",
    "min_utilization_percent",
    "tc_medio_min_per_piece",
    "rag",
]


def build_series_frame(series: list[DayRecord], oldest_first: bool = True) -> pd.DataFrame:
    """One row per day, ready for the sector charts.

    Parameters
    ----------
    series : parsed records in sheet order (newest first).
    oldest_first : reverse the rows so charts read left-to-right in time.
        Only the row order is flipped; records are never re-sorted by date.

    Returns
    -------
    DataFrame with SERIES_COLUMNS; `date` is a datetime64 column (NaT when
    the sheet date was unreadable) and rates are float with NaN for None.
    """
    if not series:
        return pd.DataFrame(columns=SERIES_COLUMNS)

    records = list(reversed(series)) if oldest_first else list(series)
    df = pd.DataFrame([r.as_dict() for r in records], columns=SERIES_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")

    numeric_cols = [c for c in SERIES_COLUMNS if c not in ("date", "date_str", "label")]
    for col in numeric_cols:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    return df


def build_sector_summary_frame(summary: dict) -> pd.DataFrame:
    """One row per sector snapshot, with a utilization RAG column."""
    per_sector = summary.get("per_sector") or []
    if not per_sector:
        return pd.DataFrame(columns=SECTOR_SUMMARY_COLUMNS)

    rows = []
    for snap in per_sector:
        row = {col: snap.get(col) for col in SECTOR_SUMMARY_COLUMNS if col != "rag"}
        row["rag"] = classify_utilization(
            snap.get("utilization_percent"),
            snap.get("target_utilization_percent"),
            snap.get("min_utilization_percent"),
        )
        rows.append(row)

    df = pd.DataFrame(rows, columns=SECTOR_SUMMARY_COLUMNS)
    logger.debug("Built sector summary frame with %d rows", len(df))
    return df
