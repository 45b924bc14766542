"""Tests for the built-in rebuild plugin."""

from __future__ import annotations

from pathlib import Path

from dutyctl.infrastructure.loader import dump_dataset
from dutyctl.infrastructure.roster import Roster
from dutyctl.plugins.builtins.rebuild import RebuildPlugin
from tests.conftest import sample_dataset


class TestRebuildPlugin:
    def test_registered_on_roster_plugins(self, roster: Roster) -> None:
        assert "rebuild-builtin" in roster.plugins.list_plugin_names()

    def test_change_reloads_dataset(self, roster: Roster, roster_root: Path) -> None:
        assert "P1" in roster.snapshot.personnel
        dump_dataset(sample_dataset(personnel=()), roster_root / "roster.yaml")

        RebuildPlugin(roster).post_entity_change(
            entity_type="personnel", entity_id="P1", action="delete"
        )

        assert roster.snapshot.personnel == {}

    def test_reads_after_notify_see_change(self, roster: Roster, roster_root: Path) -> None:
        first = roster.snapshot.version
        dump_dataset(sample_dataset(roles=()), roster_root / "roster.yaml")
        roster.notify_change("role", "user-cm", "delete")
        assert roster.snapshot.version == first + 1
        assert roster.snapshot.roles == ()
