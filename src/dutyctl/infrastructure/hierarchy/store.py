"""HierarchyStore: publishes immutable roster snapshots by atomic swap.

Readers grab :attr:`HierarchyStore.snapshot` once and work against that
object; a concurrent :meth:`HierarchyStore.rebuild` builds the next
snapshot completely before replacing the reference, so a reader sees the
old snapshot or the new one, never a mix.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from dutyctl.domain.diagnostics import HierarchyError
from dutyctl.domain.models import DutyType, Personnel, RoleAssignment, RosterDataset
from dutyctl.infrastructure.hierarchy.index import HierarchyIndex, build_index

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RosterSnapshot:
    """One consistent, read-only view of the whole roster."""

    version: int
    hierarchy: HierarchyIndex
    personnel: Mapping[str, Personnel]
    duty_types: Mapping[str, DutyType]
    roles: tuple[RoleAssignment, ...]
    personnel_by_unit: Mapping[str, tuple[str, ...]]

    def personnel_in(self, unit_ids: Iterable[str]) -> list[Personnel]:
        """People assigned to any of *unit_ids*, ordered by id."""
        ids: list[str] = []
        for unit_id in unit_ids:
            ids.extend(self.personnel_by_unit.get(unit_id, ()))
        return [self.personnel[pid] for pid in sorted(ids)]

    def roles_for(self, principal_id: str) -> list[RoleAssignment]:
        return [r for r in self.roles if r.principal_id == principal_id]

    @property
    def principals(self) -> list[str]:
        return sorted({r.principal_id for r in self.roles if r.principal_id is not None})


def build_snapshot(dataset: RosterDataset, *, version: int = 0) -> RosterSnapshot:
    """Index *dataset* into a :class:`RosterSnapshot`. Later duplicates lose."""
    hierarchy = build_index(dataset.units)

    personnel: dict[str, Personnel] = {}
    by_unit: dict[str, list[str]] = {}
    for person in dataset.personnel:
        if person.id in personnel:
            log.warning("personnel.duplicate", personnel_id=person.id)
            continue
        personnel[person.id] = person
        by_unit.setdefault(person.unit_id, []).append(person.id)

    duty_types: dict[str, DutyType] = {}
    for duty_type in dataset.duty_types:
        if duty_type.id in duty_types:
            log.warning("duty_type.duplicate", duty_type_id=duty_type.id)
            continue
        duty_types[duty_type.id] = duty_type

    return RosterSnapshot(
        version=version,
        hierarchy=hierarchy,
        personnel=MappingProxyType(personnel),
        duty_types=MappingProxyType(duty_types),
        roles=tuple(dataset.roles),
        personnel_by_unit=MappingProxyType({k: tuple(sorted(v)) for k, v in by_unit.items()}),
    )


class HierarchyStore:
    """Holds the current :class:`RosterSnapshot` and swaps in rebuilt ones."""

    def __init__(self, dataset: RosterDataset | None = None) -> None:
        self._write_lock = threading.Lock()
        self._snapshot = build_snapshot(dataset or RosterDataset(), version=0)

    @property
    def snapshot(self) -> RosterSnapshot:
        """The currently published snapshot (a single reference read)."""
        return self._snapshot

    def rebuild(self, dataset: RosterDataset) -> RosterSnapshot:
        """Build a snapshot of *dataset* in full, then publish it.

        Writers are serialized; readers are never blocked.
        """
        with self._write_lock:
            fresh = build_snapshot(dataset, version=self._snapshot.version + 1)
            self._snapshot = fresh
        log.debug(
            "hierarchy.rebuilt",
            version=fresh.version,
            units=len(fresh.hierarchy.units),
            excluded=len(fresh.hierarchy.excluded_ids),
            personnel=len(fresh.personnel),
            errors=len(fresh.hierarchy.errors),
        )
        return fresh

    def validate_hierarchy(self) -> list[HierarchyError]:
        """Structural errors found in the current snapshot."""
        return list(self._snapshot.hierarchy.errors)
