"""Tests for HierarchyStore snapshot publication."""

from __future__ import annotations

import threading

import pytest

from dutyctl.domain.models import RosterDataset
from dutyctl.infrastructure.hierarchy.store import HierarchyStore, build_snapshot
from tests.conftest import SAMPLE_PERSONNEL, person, sample_dataset, unit


class TestBuildSnapshot:
    def test_indexes_personnel_by_unit(self) -> None:
        snap = build_snapshot(sample_dataset())
        assert snap.personnel_by_unit["C1"] == ("P2",)
        assert [p.id for p in snap.personnel_in(["S1", "SS1"])] == ["P3", "P5"]

    def test_duplicate_personnel_keeps_first(self) -> None:
        dup = person("P1", "C2", "E-1", 9)
        snap = build_snapshot(sample_dataset(personnel=(*SAMPLE_PERSONNEL, dup)))
        assert snap.personnel["P1"].unit_id == "B"
        assert "P1" not in snap.personnel_by_unit.get("C2", ())

    def test_roles_for_and_principals(self) -> None:
        snap = build_snapshot(sample_dataset())
        assert [r.role_name for r in snap.roles_for("user-multi")] == [
            "section-manager",
            "standard-user",
        ]
        assert snap.principals == ["user-admin", "user-cm", "user-multi"]

    def test_snapshot_mappings_are_read_only(self) -> None:
        snap = build_snapshot(sample_dataset())
        with pytest.raises(TypeError):
            snap.personnel["PX"] = None  # type: ignore[index]


class TestHierarchyStore:
    def test_starts_empty(self) -> None:
        store = HierarchyStore()
        assert store.snapshot.version == 0
        assert store.snapshot.personnel == {}

    def test_rebuild_publishes_new_version(self) -> None:
        store = HierarchyStore()
        before = store.snapshot
        after = store.rebuild(sample_dataset())
        assert after.version == before.version + 1
        assert store.snapshot is after
        # The reader's old reference is untouched.
        assert before.personnel == {}

    def test_rebuild_is_idempotent(self) -> None:
        store = HierarchyStore()
        first = store.rebuild(sample_dataset())
        second = store.rebuild(sample_dataset())
        assert first.hierarchy.valid_ids == second.hierarchy.valid_ids
        assert dict(first.personnel) == dict(second.personnel)
        assert first.hierarchy.errors == second.hierarchy.errors

    def test_validate_hierarchy(self) -> None:
        bad = unit("S9", "Bad", "section", "B")
        store = HierarchyStore(sample_dataset(units=(*sample_dataset().units, bad)))
        [error] = store.validate_hierarchy()
        assert error.unit_id == "S9"

    def test_concurrent_readers_see_whole_snapshots(self) -> None:
        store = HierarchyStore(sample_dataset())
        small = RosterDataset(units=(unit("B", "1st Bn", "battalion"),))
        seen: list[tuple[int, int]] = []

        def read() -> None:
            for _ in range(200):
                snap = store.snapshot
                seen.append((len(snap.hierarchy.units), len(snap.personnel)))

        def write() -> None:
            for i in range(50):
                store.rebuild(small if i % 2 else sample_dataset())

        threads = [threading.Thread(target=read) for _ in range(4)]
        threads.append(threading.Thread(target=write))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert set(seen) <= {(7, 7), (1, 0)}
