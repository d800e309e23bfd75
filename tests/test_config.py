"""
Tests for tenant config loading and screen rotation order.
"""
import json

import pytest

from shiftboard.config import (
    effective_screens_order,
    load_dashboard_config,
    rotation_screen,
    validate_dashboard_config,
)
from shiftboard.errors import DashboardConfigError


@pytest.fixture
def valid_config():
    return {
        "title": "Fábrica Norte",
        "switchIntervalMs": 30000,
        "refreshIntervalMs": 300000,
        "columns": {"date": "data"},
        "sectors": [{"id": "costura", "name": "COSTURA", "apiUrl": "https://sheets.example/c"}],
    }


def write_config(clients_dir, client_id, content):
    path = clients_dir / client_id / "dashboard.json"
    path.parent.mkdir(parents=True)
    path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
    return path


class TestValidateDashboardConfig:
    def test_valid_config_has_no_errors(self, valid_config):
        assert validate_dashboard_config(valid_config) == []

    def test_missing_fields_are_listed(self):
        errors = validate_dashboard_config({"sectors": {}, "switchIntervalMs": "30s"})
        assert "`title` is required" in errors
        assert "`sectors` must be an array" in errors
        assert "`columns` is required" in errors
        assert "`switchIntervalMs` must be a number" in errors
        assert "`refreshIntervalMs` must be a number" in errors

    def test_boolean_interval_is_rejected(self, valid_config):
        valid_config["refreshIntervalMs"] = True
        assert validate_dashboard_config(valid_config) == ["`refreshIntervalMs` must be a number"]

    def test_sector_needs_endpoint(self, valid_config):
        del valid_config["sectors"][0]["apiUrl"]
        assert validate_dashboard_config(valid_config) == ["sectors[0].apiUrl is required"]

    def test_non_object(self):
        assert validate_dashboard_config([]) == ["config must be a JSON object"]


class TestLoadDashboardConfig:
    def test_loads_tenant_config(self, tmp_path, valid_config):
        write_config(tmp_path, "norte", valid_config)
        config = load_dashboard_config("norte", clients_dir=tmp_path)
        assert config["title"] == "Fábrica Norte"

    def test_blank_client_uses_default(self, tmp_path, valid_config):
        write_config(tmp_path, "default", valid_config)
        assert load_dashboard_config("  ", clients_dir=tmp_path)["title"] == "Fábrica Norte"

    def test_missing_config(self, tmp_path):
        with pytest.raises(DashboardConfigError, match="not found"):
            load_dashboard_config("ghost", clients_dir=tmp_path)

    def test_bad_json(self, tmp_path):
        write_config(tmp_path, "broken", "{not json")
        with pytest.raises(DashboardConfigError, match="Could not read"):
            load_dashboard_config("broken", clients_dir=tmp_path)

    def test_invalid_config_carries_errors(self, tmp_path):
        write_config(tmp_path, "partial", {"title": "x"})
        with pytest.raises(DashboardConfigError) as excinfo:
            load_dashboard_config("partial", clients_dir=tmp_path)
        assert "`sectors` must be an array" in excinfo.value.errors

    def test_shipped_default_config_is_valid(self):
        config = load_dashboard_config()
        assert [s["id"] for s in config["sectors"]] == ["costura", "corte"]


class TestEffectiveScreensOrder:
    sectors = [{"id": "costura"}, {"id": "corte"}]

    def test_default_order(self):
        assert effective_screens_order(None, self.sectors) == ["summary", "costura", "corte"]

    def test_unknown_and_duplicate_entries_dropped(self):
        order = ["corte", "acabamento", "corte", "summary", "summary"]
        assert effective_screens_order(order, self.sectors) == ["corte", "summary"]

    def test_never_empty(self):
        assert effective_screens_order(["acabamento"], self.sectors) == ["summary"]


class TestRotationScreen:
    screens = ["summary", "costura", "corte"]

    @pytest.mark.parametrize("elapsed_ms, expected", [
        (0, "summary"),
        (29_999, "summary"),
        (30_000, "costura"),
        (65_000, "corte"),
        (90_000, "summary"),
    ])
    def test_advances_every_interval_and_wraps(self, elapsed_ms, expected):
        assert rotation_screen(self.screens, elapsed_ms, 30_000) == expected

    def test_default_interval(self):
        assert rotation_screen(self.screens, 31_000) == "costura"

    def test_non_positive_interval_pins_first_screen(self):
        assert rotation_screen(self.screens, 120_000, 0) == "summary"

    def test_no_screens(self):
        assert rotation_screen([], 5_000) == "summary"
