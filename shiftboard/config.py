"""
Configuration: tenant config loading, column aliases, constants.

Each tenant ships a ``clients/<client_id>/dashboard.json`` describing its
sectors (one spreadsheet endpoint each) and the header names its sheets use
for every logical column.
"""

import json
import logging
from pathlib import Path

from .errors import DashboardConfigError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# File paths — adjust these if the tenant configs move
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

CLIENTS_DIR = BASE_DIR / "clients"
DEFAULT_CLIENT_ID = "default"
CONFIG_FILENAME = "dashboard.json"

# ---------------------------------------------------------------------------
# Fetch / rotation timing
# ---------------------------------------------------------------------------
REQUEST_TIMEOUT_S = 20
DEFAULT_SWITCH_INTERVAL_MS = 30_000
DEFAULT_REFRESH_INTERVAL_MS = 300_000

SUMMARY_SCREEN_ID = "summary"

# ---------------------------------------------------------------------------
# Per-sector status messages
# ---------------------------------------------------------------------------
SERVER_ERROR_MESSAGE = "server_error"
NO_DATA_MESSAGE = "no data available"
MALFORMED_TABLE_MESSAGE = "malformed display table"

# ---------------------------------------------------------------------------
# Column map
# ---------------------------------------------------------------------------
# Logical column keys understood by the table parser. A tenant may leave any
# of them out of its `columns` map; that field is then untracked.
COLUMN_KEYS = (
    "date",
    "pieces",
    "running",
    "stopped",
    "utilization",
    "targetUtilization",
    "maximumUtilization",
    "minimumUtilization",
    "tcMedio",
    "workingHours",
)

# Header names used by the first tenant's sheets
DEFAULT_COLUMNS: dict[str, str] = {
    "date": "data",
    "pieces": "Peças Fabric.",
    "running": "Funcionando",
    "stopped": "Parado",
    "utilization": "utilização de Maquina",
    "tcMedio": "TC MEDIO",
    "targetUtilization": "maximo",
    "minimumUtilization": "minimo",
}

# Historical header names, tried in order when the configured one is gone
COLUMN_FALLBACKS: dict[str, tuple[str, ...]] = {
    "date": ("data", "dia"),
    "pieces": ("Peças Fabric.", "Peças Fabricadas", "Peças", "Produção"),
    "running": ("Funcionando", "Horas Funcionando", "Tempo Funcionando"),
    "stopped": ("Parado", "Horas Paradas", "Tempo Parado"),
    "utilization": ("utilização de Maquina", "Utilização", "Utilização %"),
    "targetUtilization": ("maximo", "meta", "Meta Utilização"),
    "maximumUtilization": ("maximo", "meta"),
    "minimumUtilization": ("minimo", "Mínimo Utilização"),
    "tcMedio": ("TC MEDIO", "TC", "Tempo de Ciclo"),
    "workingHours": ("Horas Trabalhadas", "Jornada", "Turno"),
}

# ---------------------------------------------------------------------------
# Utilization RAG
# ---------------------------------------------------------------------------
# Percentage-point tolerance below target counted as amber when the tenant
# does not track a minimum utilization.
UTILIZATION_RAG_AMBER_BAND = 5.0


def validate_dashboard_config(config) -> list[str]:
    """Return a list of human-readable problems with a tenant config.

    An empty list means the config is usable.
    """
    if not isinstance(config, dict):
        return ["config must be a JSON object"]

    errors = []
    if not isinstance(config.get("title"), str) or not config.get("title"):
        errors.append("`title` is required")
    if not isinstance(config.get("sectors"), list):
        errors.append("`sectors` must be an array")
    if not isinstance(config.get("columns"), dict):
        errors.append("`columns` is required")
    for key in ("switchIntervalMs", "refreshIntervalMs"):
        value = config.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"`{key}` must be a number")

    for i, sector in enumerate(config.get("sectors") or []):
        if not isinstance(sector, dict):
            errors.append(f"sectors[{i}] must be an object")
            continue
        for key in ("id", "name", "apiUrl"):
            if not isinstance(sector.get(key), str) or not sector.get(key):
                errors.append(f"sectors[{i}].{key} is required")

    return errors


def load_dashboard_config(
    client_id: str | None = None,
    clients_dir: Path | str = CLIENTS_DIR,
) -> dict:
    """Load and validate ``<clients_dir>/<client_id>/dashboard.json``.

    Raises
    ------
    DashboardConfigError
        If the file is missing, is not valid JSON, or fails validation.
    """
    client_id = (client_id or "").strip() or DEFAULT_CLIENT_ID
    path = Path(clients_dir) / client_id / CONFIG_FILENAME

    try:
        with open(path, encoding="utf-8") as fh:
            config = json.load(fh)
    except FileNotFoundError:
        raise DashboardConfigError(
            f'Config for client "{client_id}" not found. Expected: {path}'
        ) from None
    except (OSError, json.JSONDecodeError) as exc:
        raise DashboardConfigError(
            f'Could not read config for client "{client_id}": {exc}'
        ) from exc

    errors = validate_dashboard_config(config)
    if errors:
        raise DashboardConfigError(
            f'Config for client "{client_id}" is invalid: {", ".join(errors)}',
            errors,
        )

    logger.info(
        "Loaded config for client '%s': %d sectors", client_id, len(config["sectors"])
    )
    return config


def effective_screens_order(screens_order, sectors) -> list[str]:
    """Resolve the rotation order of screens.

    Falls back to the summary screen followed by every sector. Unknown
    sector ids and repeated entries are dropped; the result is never empty.
    """
    sector_ids = [s["id"] for s in sectors or []]
    base_order = list(screens_order) if screens_order else [SUMMARY_SCREEN_ID, *sector_ids]

    known = set(sector_ids) | {SUMMARY_SCREEN_ID}
    order: list[str] = []
    for screen_id in base_order:
        if screen_id in known and screen_id not in order:
            order.append(screen_id)

    return order or [SUMMARY_SCREEN_ID]


def rotation_screen(
    screens: list[str],
    elapsed_ms: float,
    switch_interval_ms: float = DEFAULT_SWITCH_INTERVAL_MS,
) -> str:
    """Screen on display after `elapsed_ms` of auto-rotation.

    Screens advance one step every `switch_interval_ms` and wrap around; a
    non-positive interval pins the first screen.
    """
    if not screens:
        return SUMMARY_SCREEN_ID
    if switch_interval_ms <= 0:
        return screens[0]
    return screens[int(max(0, elapsed_ms) // switch_interval_ms) % len(screens)]
