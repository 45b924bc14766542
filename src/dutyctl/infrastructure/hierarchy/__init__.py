"""Unit hierarchy: validated arena index and the atomically published store."""

from dutyctl.infrastructure.hierarchy.index import HierarchyIndex, build_index
from dutyctl.infrastructure.hierarchy.store import HierarchyStore, RosterSnapshot

__all__ = ["HierarchyIndex", "HierarchyStore", "RosterSnapshot", "build_index"]
