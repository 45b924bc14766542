"""Tests for the root ``dutyctl`` group: global flags and registration."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from dutyctl import __version__
from dutyctl.cli import cli
from dutyctl.infrastructure.loader import dump_dataset
from tests.conftest import SAMPLE_UNITS, sample_dataset

TOP_LEVEL = ("scope", "eligibility", "fairness", "standby", "roles", "check")


class TestEntryPoint:
    def test_bare_invocation_prints_usage(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert f"dutyctl, version {__version__}" in result.output

    def test_help_lists_every_command(self, cli_runner: CliRunner) -> None:
        output = cli_runner.invoke(cli, ["--help"]).output
        assert all(name in output for name in TOP_LEVEL)

    @pytest.mark.parametrize("name", TOP_LEVEL)
    def test_command_help(self, cli_runner: CliRunner, name: str) -> None:
        assert cli_runner.invoke(cli, [name, "--help"]).exit_code == 0


class TestGlobalFlags:
    @pytest.mark.parametrize(
        "flags",
        [["--json"], ["-q"], ["-v"], ["--log-json"], ["-c", "/tmp/dutyctl-missing.toml"]],
        ids=["json", "quiet", "verbose", "log-json", "config"],
    )
    def test_flag_parses(self, cli_runner: CliRunner, flags: list[str]) -> None:
        assert cli_runner.invoke(cli, [*flags, "--version"]).exit_code == 0

    def test_snapshot_must_be_a_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        assert cli_runner.invoke(cli, ["-s", str(tmp_path), "check"]).exit_code == 2

    @pytest.mark.usefixtures("_isolated_roster")
    def test_snapshot_beats_config(
        self, cli_runner: CliRunner, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        other = tmp_path_factory.mktemp("other") / "small.yaml"
        dump_dataset(sample_dataset(units=SAMPLE_UNITS[:1], personnel=()), other)
        result = cli_runner.invoke(cli, ["-q", "-s", str(other), "scope", "tree"])
        assert result.exit_code == 0
        assert result.stdout.split() == ["B"]
