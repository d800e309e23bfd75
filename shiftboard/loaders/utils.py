"""
Cell normalisers: turn one raw spreadsheet cell into one typed value.

Sheets are hand-edited in pt-BR locale and have drifted over the years, so
every function here is tolerant: malformed input degrades to None (or 0 where
documented) and nothing raises.
"""

import logging
import math
import re
from datetime import date
from typing import Any, Callable

logger = logging.getLogger(__name__)

_DATE_PTBR_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_HOURS_CLOCK_RE = re.compile(r"^(-?\d+):(\d{1,2})(?::(\d{1,2}))?$")
_MIN_SEC_RE = re.compile(r"^(\d+):(\d{1,2})$")
_LEGACY_MIN_SEC_RE = re.compile(r"^(\d+)[,.](\d{2})$")
# Plain decimal left once pt-BR separators are normalised (no "1_000" or "1e3")
_PLAIN_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def _is_number(val: Any) -> bool:
    return isinstance(val, (int, float)) and not isinstance(val, bool)


def _finite_or_none(num: float) -> float | None:
    return num if math.isfinite(num) else None


def cell_text(val: Any) -> str:
    """Return the cell as text, "" when absent or empty."""
    if val is None or val == "":
        return ""
    return str(val)


def parse_number_ptbr(val: Any) -> float | None:
    """Parse a pt-BR formatted number ("1.234,5" -> 1234.5).

    Dots are thousands separators and the comma is the decimal point.
    Typed numeric cells are returned as-is. Returns None for empty,
    non-numeric or non-finite input.
    """
    if val is None or isinstance(val, bool):
        return None
    if _is_number(val):
        return _finite_or_none(float(val))

    s = str(val).strip()
    if not s:
        return None
    s = s.replace(".", "").replace(",", ".", 1)
    if not _PLAIN_DECIMAL_RE.fullmatch(s):
        return None
    return _finite_or_none(float(s))


def parse_percent_ptbr(val: Any) -> float | None:
    """Parse a percent cell ("85,5%" -> 85.5). The value is not divided by 100."""
    if val is None or isinstance(val, bool):
        return None
    if _is_number(val):
        return _finite_or_none(float(val))

    s = str(val).strip()
    if s.endswith("%"):
        s = s[:-1]
    return parse_number_ptbr(s)


def _leading_int(part: str) -> int:
    match = _LEADING_INT_RE.match(part)
    return int(match.group(1)) if match else 0


def parse_hms(val: Any) -> float:
    """Convert "HH:MM:SS" to fractional hours ("01:30:00" -> 1.5).

    Exactly three parts are required; a part that is not an integer counts
    as 0. Empty or malformed input yields 0.0, never None.
    """
    if not val:
        return 0.0
    parts = str(val).strip().split(":")
    if len(parts) != 3:
        return 0.0

    try:
        hours, minutes, seconds = (_leading_int(p) for p in parts)
        total = hours + minutes / 60 + seconds / 3600
    except (ValueError, OverflowError):
        return 0.0
    return total if math.isfinite(total) else 0.0


def parse_hours(val: Any) -> float | None:
    """Parse an hour count written as "H:MM", "H:MM:SS" or a plain number.

    Minutes and seconds are clamped to 59. The result is never negative.
    Returns None when nothing parses.
    """
    if val is None or isinstance(val, bool):
        return None
    if _is_number(val):
        num = _finite_or_none(float(val))
        return None if num is None else max(0.0, num)

    s = str(val).strip()
    if not s:
        return None

    match = _HOURS_CLOCK_RE.match(s)
    if match:
        try:
            hours = int(match.group(1))
            minutes = min(int(match.group(2)), 59)
            seconds = min(int(match.group(3) or 0), 59)
            total = hours + minutes / 60 + seconds / 3600
        except (ValueError, OverflowError):
            return None
        return max(0.0, total)

    num = parse_number_ptbr(s)
    if num is None:
        return None
    return max(0.0, num)


# ---------------------------------------------------------------------------
# Cycle time: ordered attempts, first strictly positive result wins
# ---------------------------------------------------------------------------
def _attempt_hms_minutes(text: str) -> float | None:
    hours = parse_hms(text)
    return hours * 60 if hours > 0 else None


def _minutes_and_seconds(match: re.Match | None) -> float | None:
    if not match:
        return None
    try:
        minutes, seconds = int(match.group(1)), int(match.group(2))
        if seconds >= 60:
            return None
        return minutes + seconds / 60
    except (ValueError, OverflowError):
        return None


def _attempt_min_sec(text: str) -> float | None:
    return _minutes_and_seconds(_MIN_SEC_RE.match(text))


def _attempt_legacy_min_sec(text: str) -> float | None:
    # "1,30" used to mean 1 min 30 s on older sheets
    return _minutes_and_seconds(_LEGACY_MIN_SEC_RE.match(text))


def _attempt_decimal_minutes(text: str) -> float | None:
    text = text.replace(",", ".", 1)
    if not _PLAIN_DECIMAL_RE.fullmatch(text):
        return None
    return _finite_or_none(float(text))


_CYCLE_TIME_ATTEMPTS: tuple[Callable[[str], float | None], ...] = (
    _attempt_hms_minutes,
    _attempt_min_sec,
    _attempt_legacy_min_sec,
    _attempt_decimal_minutes,
)


def parse_cycle_time_minutes(val: Any) -> float | None:
    """Parse an average cycle time cell into minutes per piece.

    Formats are tried in a fixed order, which decides ambiguous values:
    "HH:MM:SS", "M:SS", legacy "M,SS"/"M.SS", then a plain decimal number of
    minutes. Typed numeric cells are read as minutes. Returns None unless
    some attempt yields a strictly positive value.
    """
    if val is None or isinstance(val, bool):
        return None
    if _is_number(val):
        num = _finite_or_none(float(val))
        return num if num is not None and num > 0 else None

    text = str(val).strip()
    if not text:
        return None

    for attempt in _CYCLE_TIME_ATTEMPTS:
        minutes = attempt(text)
        if minutes is not None and minutes > 0:
            return minutes
    return None


def parse_date_ptbr(val: Any) -> date | None:
    """Parse a strict "dd/mm/yyyy" cell into a date.

    Any other shape, or an impossible calendar date, yields None.
    """
    s = str(val if val is not None else "").strip()
    match = _DATE_PTBR_RE.match(s)
    if not match:
        return None
    day, month, year = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug("Impossible calendar date in cell: %s", s)
        return None
