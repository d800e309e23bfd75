"""
Column resolution: map logical column keys to physical header positions.

Tenants rename headers, drop accents or change case between sheets; the
resolver absorbs that drift once per table so rows can be read positionally.
"""

import logging
import re
import unicodedata
from typing import Iterable, Sequence

from ..config import COLUMN_FALLBACKS, COLUMN_KEYS

logger = logging.getLogger(__name__)


def normalise_header(name) -> str:
    """Trim, collapse whitespace, lowercase and strip diacritics.

    "  Peças  Fabric. " -> "pecas fabric."
    """
    if name is None:
        return ""
    s = unicodedata.normalize("NFKD", str(name))
    s = "".join(c for c in s if not unicodedata.combining(c))
    s = re.sub(r"\s+", " ", s).strip()
    return s.lower()


def _find_header(headers: Sequence[str], name: str, normalised: list[str]) -> int | None:
    for idx, header in enumerate(headers):
        if header == name:
            return idx
    key = normalise_header(name)
    if not key:
        return None
    for idx, header_key in enumerate(normalised):
        if header_key == key:
            return idx
    return None


def resolve_column(
    headers: Sequence[str],
    logical_key: str,
    configured_name: str | None,
    fallback_names: Iterable[str] | None = None,
) -> int | None:
    """Return the index of a logical column in `headers`, or None.

    Tries an exact match of `configured_name`, then a normalised match, then
    the same two steps for each fallback name in order. Fallbacks default to
    config.COLUMN_FALLBACKS[logical_key]. An unconfigured key is untracked
    and never resolves.
    """
    if not configured_name:
        return None
    if fallback_names is None:
        fallback_names = COLUMN_FALLBACKS.get(logical_key, ())

    normalised = [normalise_header(h) for h in headers]
    for candidate in (configured_name, *fallback_names):
        if not candidate:
            continue
        idx = _find_header(headers, candidate, normalised)
        if idx is not None:
            if candidate != configured_name:
                logger.info(
                    "Column '%s' resolved via alias '%s' (configured '%s')",
                    logical_key, candidate, configured_name,
                )
            return idx

    logger.debug("Column '%s' ('%s') not found in headers", logical_key, configured_name)
    return None


def resolve_columns(headers: Sequence[str], columns: dict) -> dict[str, int | None]:
    """Resolve every logical column once for a table.

    `targetUtilization` is read from the `maximumUtilization` key when the
    tenant configures the target under that name.
    """
    headers = ["" if h is None else str(h) for h in headers]
    columns = columns or {}

    indices: dict[str, int | None] = {}
    for key in COLUMN_KEYS:
        indices[key] = resolve_column(headers, key, columns.get(key))

    if indices["targetUtilization"] is None:
        indices["targetUtilization"] = indices["maximumUtilization"]

    return indices
