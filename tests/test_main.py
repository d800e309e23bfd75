"""
Tests for the command-line pipeline run.
"""
import pytest

import main


class TestMain:
    def test_demo_run_prints_summary(self, capsys):
        assert main.main(["--demo"]) == 0
        out = capsys.readouterr().out
        assert "SHIFTBOARD DEMO" in out
        assert "[ 2 ] SUMMARY" in out
        assert "COSTURA:" in out

    def test_workbook_run(self, sheet_path, capsys):
        assert main.main(["--xlsx", str(sheet_path), "--sheet", "Display"]) == 0
        out = capsys.readouterr().out
        assert "COSTURA: 2 rows" in out
        assert "Avg TC:       00:00:" in out

    def test_missing_client_config_fails(self):
        assert main.main(["no-such-client"]) == 1

    def test_help_exits_cleanly(self):
        with pytest.raises(SystemExit) as exc:
            main.main(["--help"])
        assert exc.value.code == 0
