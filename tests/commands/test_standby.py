"""Tests for the standby command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner, Result

from dutyctl.cli import cli


def _expected(runner: CliRunner, *args: str) -> Result:
    flags = [a for a in args if a.startswith("-")]
    rest = [a for a in args if not a.startswith("-")]
    return runner.invoke(cli, [*flags, "standby", "expected", *rest])


@pytest.mark.usefixtures("_isolated_roster")
class TestStandbyExpected:
    def test_slots(self, cli_runner: CliRunner) -> None:
        result = _expected(cli_runner, "guard", "2026-03-01", "2026-03-20")
        assert result.exit_code == 0
        assert "slots: 4" in result.stdout

    def test_json_periods(self, cli_runner: CliRunner) -> None:
        result = _expected(cli_runner, "--json", "guard", "2026-03-01", "2026-03-01")
        data = json.loads(result.stdout)["data"]
        assert data["days"] == 1
        assert data["slots"] == 2
        assert data["periods"] == [["2026-03-01", "2026-03-01"]]

    def test_reversed_window(self, cli_runner: CliRunner) -> None:
        result = _expected(cli_runner, "guard", "2026-03-20", "2026-03-01")
        assert result.exit_code == 1
        assert "before start" in result.stderr

    def test_bad_date(self, cli_runner: CliRunner) -> None:
        result = _expected(cli_runner, "guard", "03/01/2026", "2026-03-20")
        assert result.exit_code == 2

    def test_no_config_warning(self, cli_runner: CliRunner) -> None:
        result = _expected(cli_runner, "staff", "2026-03-01", "2026-03-20")
        assert result.exit_code == 0
        assert "slots: 0" in result.stdout
        assert "no supernumerary configuration" in result.stderr
