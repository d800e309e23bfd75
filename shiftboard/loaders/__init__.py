"""Data ingestion for sector display tables."""

from .columns import resolve_column, resolve_columns
from .display_table import DayRecord, parse_display_table
from .sheets_api import fetch_display_table, load_sector, refresh_sectors
from .sheets_api import initial_sector_state, sectors_for_summary
from .workbook import load_display_table_xlsx, make_workbook_fetch, workbook_sectors

__all__ = [
    "resolve_column",
    "resolve_columns",
    "DayRecord",
    "parse_display_table",
    "fetch_display_table",
    "load_sector",
    "refresh_sectors",
    "initial_sector_state",
    "sectors_for_summary",
    "load_display_table_xlsx",
    "make_workbook_fetch",
    "workbook_sectors",
]
