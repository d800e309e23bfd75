"""
Remote fetch of sector display tables and concurrent refresh of all sectors.

Every sector is fetched independently: one slow or broken endpoint times out
or fails on its own without holding back the others.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Callable

import requests

from ..config import NO_DATA_MESSAGE, REQUEST_TIMEOUT_S
from ..errors import SectorDataError, SectorFetchError, ShiftboardError
from .display_table import DayRecord, parse_display_table

logger = logging.getLogger(__name__)

FetchFn = Callable[..., dict]


def fetch_display_table(
    api_url: str,
    token: str | None = None,
    timeout: float = REQUEST_TIMEOUT_S,
    session: requests.Session | None = None,
) -> dict:
    """GET one sector's RawTable JSON.

    A millisecond timestamp is sent as `_` so caches never serve a stale
    table.

    Raises
    ------
    SectorFetchError
        On timeout, connection failure, non-2xx status or a non-JSON body.
    """
    params = {"_": int(time.time() * 1000)}
    if token:
        params["token"] = token

    http = session or requests
    try:
        response = http.get(
            api_url,
            params=params,
            headers={"Cache-Control": "no-store"},
            timeout=timeout,
        )
    except requests.Timeout:
        raise SectorFetchError(f"Request timed out ({round(timeout)}s)") from None
    except requests.RequestException as exc:
        raise SectorFetchError(f"Request failed: {exc}") from exc

    if not response.ok:
        raise SectorFetchError(f"HTTP error: {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise SectorFetchError("Response is not valid JSON") from exc


def initial_sector_state(sectors) -> dict[str, dict]:
    """Empty state for every configured sector, before the first refresh."""
    return {
        sector["id"]: {
            "series": [],
            "row_count": 0,
            "has_error": False,
            "error_msg": "",
            "updated_at": None,
        }
        for sector in sectors
    }


def load_sector(
    sector: dict,
    columns: dict,
    fetch: FetchFn = fetch_display_table,
    timeout: float = REQUEST_TIMEOUT_S,
) -> dict:
    """Fetch and parse one sector into a fresh, error-free state dict.

    Raises
    ------
    SectorDataError
        If the endpoint reports an error or the table has no rows.
    SectorFetchError
        If the endpoint could not be fetched.
    """
    payload = fetch(sector["apiUrl"], sector.get("token"), timeout=timeout)
    series = parse_display_table(payload, columns)
    if not series:
        raise SectorDataError(NO_DATA_MESSAGE)

    row_count = payload.get("rowCount") if isinstance(payload, dict) else None
    return {
        "series": series,
        "row_count": row_count if isinstance(row_count, int) else len(series),
        "has_error": False,
        "error_msg": "",
        "updated_at": datetime.now(),
    }


def _failed_state(sector_state: dict, error_msg: str) -> dict:
    return {
        **sector_state,
        "has_error": True,
        "error_msg": error_msg,
        "updated_at": datetime.now(),
    }


def refresh_sectors(
    sectors,
    columns: dict,
    previous: dict[str, dict] | None = None,
    fetch: FetchFn = fetch_display_table,
    timeout: float = REQUEST_TIMEOUT_S,
    max_workers: int | None = None,
) -> dict[str, dict]:
    """Fetch every sector in parallel and wait for all of them to settle.

    A failed sector keeps the series from `previous` and is flagged with
    `has_error` / `error_msg`; the other sectors are unaffected.
    """
    sectors = list(sectors)
    state = initial_sector_state(sectors)
    if previous:
        state.update({k: dict(v) for k, v in previous.items() if k in state})
    if not sectors:
        return state

    start_time = time.time()
    workers = max_workers or len(sectors)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_id = {
            executor.submit(load_sector, sector, columns, fetch, timeout): sector["id"]
            for sector in sectors
        }

        for future in as_completed(future_to_id):
            sector_id = future_to_id[future]
            try:
                state[sector_id] = future.result()
                logger.info(
                    "Sector '%s' refreshed: %d rows", sector_id, len(state[sector_id]["series"])
                )
            except (ShiftboardError, requests.RequestException) as exc:
                logger.warning("Sector '%s' failed: %s", sector_id, exc)
                state[sector_id] = _failed_state(state[sector_id], str(exc))
            except Exception as exc:
                logger.exception("Sector '%s' failed unexpectedly", sector_id)
                state[sector_id] = _failed_state(state[sector_id], str(exc) or type(exc).__name__)

    logger.info("Refreshed %d sectors in %.2fs", len(sectors), time.time() - start_time)
    return state


def sectors_for_summary(sectors, state: dict[str, dict]) -> list[dict]:
    """Pair each configured sector with its current series (empty if unfetched)."""
    result = []
    for sector in sectors:
        sector_state = state.get(sector["id"]) or {}
        series: list[DayRecord] = sector_state.get("series") or []
        result.append({"id": sector["id"], "name": sector["name"], "series": series})
    return result
