"""
Loader for a sector sheet exported to .xlsx.

Produces the same RawTable shape as the remote endpoint so an exported sheet
can be parsed offline. openpyxl hands back native dates and times; those are
written back in the textual pt-BR forms the cell normalisers read.
"""

import logging
from datetime import date, datetime, time, timedelta
from pathlib import Path

import openpyxl

logger = logging.getLogger(__name__)


def _format_duration(total_seconds: float) -> str:
    total_seconds = max(0, int(round(total_seconds)))
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def to_raw_cell(val):
    """Convert a native openpyxl cell value into its sheet-display text."""
    if isinstance(val, (datetime, date)):
        return val.strftime("%d/%m/%Y")
    if isinstance(val, time):
        return _format_duration(val.hour * 3600 + val.minute * 60 + val.second)
    if isinstance(val, timedelta):
        return _format_duration(val.total_seconds())
    return val


def load_display_table_xlsx(path: str, sheet_name: str | None = None) -> dict:
    """Load an exported sector sheet into a RawTable dict.

    Assumptions
    -----------
    - The first non-empty row holds the headers.
    - Every following row with at least one value is a data row.
    - Rows keep the sheet's order (newest first on the live sheets).
    """
    try:
        wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
    except Exception:
        logger.exception("Failed to open workbook: %s", path)
        raise

    try:
        if sheet_name and sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            if sheet_name:
                logger.warning("Sheet '%s' not found, using '%s'", sheet_name, wb.sheetnames[0])
            ws = wb[wb.sheetnames[0]]

        headers: list[str] = []
        rows: list[list] = []
        for values in ws.iter_rows(values_only=True):
            if all(v is None or v == "" for v in values):
                continue
            if not headers:
                headers = [str(v).strip() if v is not None else "" for v in values]
                continue
            rows.append([to_raw_cell(v) for v in values])
    finally:
        wb.close()

    # Trailing empty header cells are formatting leftovers
    while headers and not headers[-1]:
        headers.pop()

    logger.info("Loaded %d rows from %s", len(rows), path)
    return {"headers": headers, "rows": rows, "rowCount": len(rows), "ok": True}


def workbook_sectors(paths) -> list[dict]:
    """One sector per exported workbook, named after the file."""
    return [
        {"id": Path(p).stem, "name": Path(p).stem.upper(), "apiUrl": str(p)}
        for p in paths
    ]


def make_workbook_fetch(sheet_name: str | None = None):
    """Return a fetch callable that reads a sector's `apiUrl` as a local .xlsx path.

    Drop-in replacement for sheets_api.fetch_display_table.
    """
    def fetch(api_url: str, token=None, timeout=None) -> dict:
        return load_display_table_xlsx(api_url, sheet_name)

    return fetch
