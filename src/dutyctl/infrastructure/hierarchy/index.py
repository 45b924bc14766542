"""HierarchyIndex: validated arena of org units with a children index.

Built once per dataset in O(n). Units are stored in a table keyed by id;
parent -> child links that pass validation are kept in a NetworkX
DiGraph and flattened into a children map for O(1) lookups.

Validation never raises. Each structural problem becomes a
:class:`HierarchyError` and the offending unit, together with everything
beneath it, is excluded: a unit is valid only if its parent chain reaches
a root through valid links.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TypeAlias

import networkx as nx

from dutyctl.domain.diagnostics import HierarchyError, HierarchyErrorKind
from dutyctl.domain.models import OrgUnit
from dutyctl.domain.types import level_depth

logger = logging.getLogger(__name__)

_Tree: TypeAlias = nx.DiGraph


@dataclass(frozen=True)
class HierarchyIndex:
    """Immutable view of one unit forest. Safe to share between threads."""

    units: Mapping[str, OrgUnit]
    tree: _Tree
    valid_ids: frozenset[str]
    errors: tuple[HierarchyError, ...] = ()
    _children: Mapping[str, tuple[str, ...]] = field(default_factory=dict, repr=False)
    _declared: Mapping[str, tuple[str, ...]] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, unit_id: str) -> OrgUnit | None:
        return self.units.get(unit_id)

    def children_of(self, unit_id: str) -> tuple[str, ...]:
        """Valid child ids of *unit_id*, ordered by name then id."""
        return self._children.get(unit_id, ())

    def declared_children_of(self, unit_id: str) -> tuple[str, ...]:
        """Every unit naming *unit_id* as parent, valid or not, ordered by id."""
        return self._declared.get(unit_id, ())

    def organization_of(self, unit_id: str) -> str | None:
        unit = self.units.get(unit_id)
        return unit.organization_id if unit else None

    def is_valid(self, unit_id: str) -> bool:
        return unit_id in self.valid_ids

    @property
    def excluded_ids(self) -> frozenset[str]:
        """Known units left out of every traversal."""
        return frozenset(self.units) - self.valid_ids

    def roots(self, organization_id: str | None = None) -> list[OrgUnit]:
        """Valid top-level units, optionally for one organization."""
        found = [
            u
            for u in self.units.values()
            if u.parent_id is None
            and u.id in self.valid_ids
            and (organization_id is None or u.organization_id == organization_id)
        ]
        return sorted(found, key=lambda u: (u.name, u.id))

    def organizations(self) -> list[str]:
        return sorted({u.organization_id for u in self.units.values()})

    # ------------------------------------------------------------------
    # Display helpers
    # ------------------------------------------------------------------

    def unit_path(self, unit_id: str, *, separator: str = " > ") -> str:
        """Names from the root down to *unit_id*, e.g. ``"02301 > H Co > S1"``.

        Empty for unknown or excluded units.
        """
        if unit_id not in self.valid_ids:
            return ""
        names: list[str] = []
        current: str | None = unit_id
        # Valid chains are acyclic; the bound guards against misuse.
        for _ in range(len(self.units)):
            if current is None:
                break
            unit = self.units[current]
            names.append(unit.name)
            current = unit.parent_id
        return separator.join(reversed(names))

    def walk(self, root_id: str | None = None) -> list[tuple[OrgUnit, int]]:
        """Depth-first ``(unit, depth)`` listing, siblings sorted by name.

        Starts at *root_id* (depth 0) or at every valid root.
        """
        if root_id is not None:
            if root_id not in self.valid_ids:
                return []
            starts = [root_id]
        else:
            starts = [u.id for u in self.roots()]

        listing: list[tuple[OrgUnit, int]] = []
        stack: list[tuple[str, int]] = [(uid, 0) for uid in reversed(starts)]
        while stack:
            uid, depth = stack.pop()
            listing.append((self.units[uid], depth))
            for child in reversed(self.children_of(uid)):
                stack.append((child, depth + 1))
        return listing


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def build_index(units: Iterable[OrgUnit]) -> HierarchyIndex:
    """Validate *units* and build a :class:`HierarchyIndex`.

    Total and deterministic: the same input always yields the same index.
    """
    table: dict[str, OrgUnit] = {}
    errors: list[HierarchyError] = []

    for unit in units:
        if unit.id in table:
            errors.append(
                HierarchyError(
                    kind=HierarchyErrorKind.DUPLICATE_ID,
                    unit_id=unit.id,
                    parent_id=unit.parent_id,
                    message=f"Duplicate unit id '{unit.id}'; keeping first definition",
                )
            )
            continue
        table[unit.id] = unit

    broken: set[str] = set()

    # Cycles: the child -> parent graph has out-degree <= 1, so each
    # simple cycle is a closed parent chain.
    parent_graph: _Tree = nx.DiGraph()
    parent_graph.add_nodes_from(table)
    parent_graph.add_edges_from(
        (u.id, u.parent_id) for u in table.values() if u.parent_id in table
    )
    for cycle in nx.simple_cycles(parent_graph):
        for unit_id in sorted(cycle):
            if unit_id in broken:
                continue
            broken.add(unit_id)
            errors.append(
                HierarchyError(
                    kind=HierarchyErrorKind.CYCLE,
                    unit_id=unit_id,
                    parent_id=table[unit_id].parent_id,
                    message=f"Unit '{unit_id}' is part of a parent cycle",
                )
            )

    tree: _Tree = nx.DiGraph()
    for unit in sorted(table.values(), key=lambda u: u.id):
        tree.add_node(unit.id)
        if unit.id in broken or unit.parent_id is None:
            continue
        problem = _link_problem(unit, table.get(unit.parent_id))
        if problem is not None:
            broken.add(unit.id)
            errors.append(problem)
            continue
        tree.add_edge(unit.parent_id, unit.id)

    valid = _reachable_from_roots(table, tree, broken)
    children = _children_map(table, tree, valid)
    declared: dict[str, list[str]] = {}
    for unit_id in sorted(table):
        parent_id = table[unit_id].parent_id
        if parent_id is not None:
            declared.setdefault(parent_id, []).append(unit_id)

    for error in errors:
        logger.warning("hierarchy.%s unit=%s: %s", error.kind, error.unit_id, error.message)

    return HierarchyIndex(
        units=MappingProxyType(table),
        tree=nx.freeze(tree),
        valid_ids=frozenset(valid),
        errors=tuple(errors),
        _children=MappingProxyType(children),
        _declared=MappingProxyType({k: tuple(v) for k, v in declared.items()}),
    )


def _link_problem(unit: OrgUnit, parent: OrgUnit | None) -> HierarchyError | None:
    """Check the link from *unit* to its parent; None when the link is sound."""
    if parent is None:
        return HierarchyError(
            kind=HierarchyErrorKind.ORPHANED_PARENT,
            unit_id=unit.id,
            parent_id=unit.parent_id,
            message=f"Parent '{unit.parent_id}' of unit '{unit.id}' does not exist",
        )
    if level_depth(unit.hierarchy_level) != level_depth(parent.hierarchy_level) + 1:
        return HierarchyError(
            kind=HierarchyErrorKind.LEVEL_SKIP,
            unit_id=unit.id,
            parent_id=parent.id,
            message=(
                f"Unit '{unit.id}' ({unit.hierarchy_level}) cannot sit directly "
                f"under '{parent.id}' ({parent.hierarchy_level})"
            ),
        )
    if unit.organization_id != parent.organization_id:
        return HierarchyError(
            kind=HierarchyErrorKind.ORGANIZATION_MISMATCH,
            unit_id=unit.id,
            parent_id=parent.id,
            message=(
                f"Unit '{unit.id}' belongs to '{unit.organization_id}' but its "
                f"parent belongs to '{parent.organization_id}'"
            ),
        )
    return None


def _reachable_from_roots(
    table: Mapping[str, OrgUnit],
    tree: _Tree,
    broken: set[str],
) -> set[str]:
    """Breadth-first walk from every sound root over validated links."""
    queue: deque[str] = deque(
        u.id for u in table.values() if u.parent_id is None and u.id not in broken
    )
    seen: set[str] = set(queue)
    while queue:
        current = queue.popleft()
        for child in tree.successors(current):
            if child not in seen and child not in broken:
                seen.add(child)
                queue.append(child)
    return seen


def _children_map(
    table: Mapping[str, OrgUnit],
    tree: _Tree,
    valid: set[str],
) -> dict[str, tuple[str, ...]]:
    children: dict[str, tuple[str, ...]] = {}
    for unit_id in valid:
        kids = [c for c in tree.successors(unit_id) if c in valid]
        if kids:
            kids.sort(key=lambda c: (table[c].name, c))
            children[unit_id] = tuple(kids)
    return children
