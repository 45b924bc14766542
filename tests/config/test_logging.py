"""Tests for structlog configuration and snapshot context binding."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from dutyctl.config.logging import (
    bind_snapshot_context,
    clear_snapshot_context,
    configure_logging,
)
from dutyctl.config.settings import DutySettings
from dutyctl.infrastructure.roster import Roster
from tests.conftest import sample_dataset


@pytest.fixture(autouse=True)
def _isolated_logging() -> Generator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    duty_level = logging.getLogger("dutyctl").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("dutyctl").setLevel(duty_level)
    clear_snapshot_context()


def _last_json_line(err: str) -> dict[str, Any]:
    lines = [line for line in err.splitlines() if line.strip()]
    return json.loads(lines[-1])


class TestLevels:
    @pytest.mark.parametrize(
        ("verbose", "expected"),
        [(True, logging.DEBUG), (False, logging.WARNING)],
    )
    def test_package_level_follows_verbose(self, verbose: bool, expected: int) -> None:
        configure_logging(verbose=verbose)
        assert logging.getLogger("dutyctl").level == expected
        assert logging.getLogger().level == logging.WARNING

    def test_debug_dropped_when_quiet(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("dutyctl.services").debug("scope.resolved")
        assert capfd.readouterr().err == ""

    def test_library_debug_dropped_when_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("networkx").debug("graph noise")
        assert capfd.readouterr().err == ""

    def test_reconfigure_keeps_one_handler(self) -> None:
        configure_logging()
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestJsonLines:
    def test_structlog_event_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("dutyctl.services.standby").warning("standby.empty", unit="B")
        event = _last_json_line(capfd.readouterr().err)
        assert event["event"] == "standby.empty"
        assert event["unit"] == "B"
        assert event["level"] == "warning"
        assert event["logger"] == "dutyctl.services.standby"
        assert "timestamp" in event

    def test_stdlib_records_share_the_format(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("dutyctl.infrastructure.hierarchy.index").warning("hierarchy.cycle")
        event = _last_json_line(capfd.readouterr().err)
        assert event["event"] == "hierarchy.cycle"
        assert event["logger"] == "dutyctl.infrastructure.hierarchy.index"


class TestSnapshotContext:
    def test_bound_values_appear_in_events(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_snapshot_context(Path("/data/roster.yaml"), 7)
        structlog.get_logger("dutyctl.test").warning("marker")
        event = _last_json_line(capfd.readouterr().err)
        assert event["snapshot"] == str(Path("/data/roster.yaml"))
        assert event["snapshot_version"] == 7

    def test_clear_removes_values(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_snapshot_context(None, 1)
        clear_snapshot_context()
        structlog.get_logger("dutyctl.test").warning("marker")
        event = _last_json_line(capfd.readouterr().err)
        assert "snapshot" not in event
        assert "snapshot_version" not in event

    def test_roster_reload_binds_version(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        roster = Roster(DutySettings.from_cli(roster_root=tmp_path), sample_dataset())
        roster.reload()
        version = roster.reload().version
        structlog.get_logger("dutyctl.test").warning("marker")
        event = _last_json_line(capfd.readouterr().err)
        assert event["snapshot"] == "<memory>"
        assert event["snapshot_version"] == version
