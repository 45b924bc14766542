"""Scope resolution: which units and personnel a role may see.

- ``global-admin`` resolves to every unit and every person.
- Every other role resolves to its scope unit plus all descendants,
  found by an explicit-queue walk over the validated children index.
- A null scope on any role but ``global-admin``, an unknown scope unit,
  an excluded scope unit, or an unrecognised role name all resolve to the
  empty scope. "No access" is a result, not a failure.

:func:`resolve_scope` is pure over a :class:`RosterSnapshot`; the
service wraps it in a :class:`ServiceResult` for the CLI.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import BaseModel, Field

from dutyctl.domain.diagnostics import ScopeError, ScopeErrorKind
from dutyctl.domain.models import RoleAssignment
from dutyctl.domain.types import RoleName
from dutyctl.infrastructure.hierarchy.index import HierarchyIndex
from dutyctl.infrastructure.hierarchy.store import RosterSnapshot
from dutyctl.services.base import BaseService
from dutyctl.services.result import ServiceResult, not_found
from dutyctl.services.telemetry import trace_span, traced

log = structlog.get_logger(__name__)


class ScopeResult(BaseModel):
    """Units and personnel visible to one role (or the union of several)."""

    model_config = {"frozen": True}

    unit_ids: frozenset[str] = Field(default_factory=frozenset)
    personnel_ids: frozenset[str] = Field(default_factory=frozenset)
    universal: bool = False
    excluded_unit_ids: frozenset[str] = Field(default_factory=frozenset)
    errors: tuple[ScopeError, ...] = ()

    def contains_unit(self, unit_id: str) -> bool:
        return unit_id in self.unit_ids

    def contains_personnel(self, personnel_id: str) -> bool:
        return personnel_id in self.personnel_ids


EMPTY_SCOPE = ScopeResult()


# ---------------------------------------------------------------------------
# Pure resolution
# ---------------------------------------------------------------------------


def descendant_units(hierarchy: HierarchyIndex, root_id: str) -> tuple[set[str], set[str]]:
    """Return ``(visited, excluded)`` for the subtree under *root_id*.

    *visited* is *root_id* plus every valid descendant. *excluded* holds
    units that name a visited unit as parent but failed validation; they
    are not entered. An invalid *root_id* yields ``(set(), {root_id})``.
    """
    if not hierarchy.is_valid(root_id):
        return set(), {root_id} if hierarchy.get(root_id) is not None else set()

    visited: set[str] = {root_id}
    excluded: set[str] = set()
    queue: deque[str] = deque([root_id])
    while queue:
        current = queue.popleft()
        for child in hierarchy.declared_children_of(current):
            if not hierarchy.is_valid(child):
                excluded.add(child)
                continue
            if child not in visited:
                visited.add(child)
                queue.append(child)
    return visited, excluded


def _universal(snapshot: RosterSnapshot) -> ScopeResult:
    return ScopeResult(
        unit_ids=frozenset(snapshot.hierarchy.units),
        personnel_ids=frozenset(snapshot.personnel),
        universal=True,
    )


def resolve_scope(snapshot: RosterSnapshot, role: RoleAssignment) -> ScopeResult:
    """Resolve *role* against *snapshot*. Deterministic; never raises."""
    parsed = role.role
    if parsed is None:
        log.warning("scope.unknown_role", role_name=role.role_name)
        return ScopeResult(
            errors=(
                ScopeError(
                    kind=ScopeErrorKind.UNKNOWN_ROLE,
                    role_name=role.role_name,
                    message=f"Unknown role '{role.role_name}'; no access granted",
                ),
            )
        )

    if parsed is RoleName.GLOBAL_ADMIN:
        return _universal(snapshot)

    if role.scope_unit_id is None:
        log.info("scope.null_scope", role_name=role.role_name)
        return EMPTY_SCOPE

    hierarchy = snapshot.hierarchy
    if hierarchy.get(role.scope_unit_id) is None:
        log.info("scope.unknown_unit", role_name=role.role_name, unit_id=role.scope_unit_id)
        return EMPTY_SCOPE

    unit_ids, excluded = descendant_units(hierarchy, role.scope_unit_id)
    if excluded:
        log.warning(
            "scope.units_excluded",
            role_name=role.role_name,
            scope_unit_id=role.scope_unit_id,
            excluded=sorted(excluded),
        )
    personnel_ids = {p.id for p in snapshot.personnel_in(unit_ids)}
    return ScopeResult(
        unit_ids=frozenset(unit_ids),
        personnel_ids=frozenset(personnel_ids),
        excluded_unit_ids=frozenset(excluded),
    )


def merge_scopes(scopes: Iterable[ScopeResult]) -> ScopeResult:
    """Union of *scopes*; an empty iterable yields the empty scope."""
    units: set[str] = set()
    people: set[str] = set()
    excluded: set[str] = set()
    errors: list[ScopeError] = []
    universal = False
    for scope in scopes:
        units |= scope.unit_ids
        people |= scope.personnel_ids
        excluded |= scope.excluded_unit_ids
        errors.extend(scope.errors)
        universal = universal or scope.universal
    return ScopeResult(
        unit_ids=frozenset(units),
        personnel_ids=frozenset(people),
        universal=universal,
        excluded_unit_ids=frozenset(excluded - units),
        errors=tuple(errors),
    )


def resolve_principal_scope(
    snapshot: RosterSnapshot,
    roles: Iterable[RoleAssignment],
) -> ScopeResult:
    """Everything any of *roles* can see. No roles means no access."""
    return merge_scopes(resolve_scope(snapshot, role) for role in roles)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def _scope_payload(scope: ScopeResult) -> dict[str, Any]:
    return {
        "universal": scope.universal,
        "unit_count": len(scope.unit_ids),
        "personnel_count": len(scope.personnel_ids),
        "unit_ids": sorted(scope.unit_ids),
        "personnel_ids": sorted(scope.personnel_ids),
        "excluded_unit_ids": sorted(scope.excluded_unit_ids),
    }


def _scope_warnings(scope: ScopeResult) -> list[str]:
    warnings = [e.message for e in scope.errors]
    warnings.extend(
        f"Unit '{uid}' excluded from scope (invalid hierarchy)"
        for uid in sorted(scope.excluded_unit_ids)
    )
    return warnings


class ScopeService(BaseService):
    """Resolves role and principal scopes; lists the unit tree."""

    @traced
    def resolve(self, role_name: str, scope_unit_id: str | None = None) -> ServiceResult:
        """Resolve a single role assignment."""
        snapshot = self._snapshot()
        role = RoleAssignment(role_name=role_name, scope_unit_id=scope_unit_id)
        with trace_span("traverse") as span:
            scope = resolve_scope(snapshot, role)
            if span:
                span.annotate(units=len(scope.unit_ids))

        data = {"role": role_name, "scope_unit_id": scope_unit_id, **_scope_payload(scope)}
        return ServiceResult(
            ok=True,
            op="resolve_scope",
            data=data,
            warnings=_scope_warnings(scope),
        )

    @traced
    def resolve_principal(self, principal_id: str) -> ServiceResult:
        """Resolve the union of every role held by *principal_id*."""
        snapshot = self._snapshot()
        roles = snapshot.roles_for(principal_id)
        scope = resolve_principal_scope(snapshot, roles)
        data = {
            "principal_id": principal_id,
            "roles": [r.model_dump(exclude={"principal_id"}) for r in roles],
            **_scope_payload(scope),
        }
        return ServiceResult(
            ok=True,
            op="resolve_principal_scope",
            data=data,
            warnings=_scope_warnings(scope),
        )

    @traced
    def tree(self, root_id: str | None = None) -> ServiceResult:
        """Indented unit listing, from *root_id* or from every root."""
        hierarchy = self._snapshot().hierarchy
        if root_id is not None and hierarchy.get(root_id) is None:
            return not_found("unit_tree", "unit_id", root_id)

        items = [
            {
                "id": unit.id,
                "name": unit.name,
                "level": str(unit.hierarchy_level),
                "depth": depth,
                "path": hierarchy.unit_path(unit.id),
            }
            for unit, depth in hierarchy.walk(root_id)
        ]
        warnings: list[str] = []
        if root_id is not None and not hierarchy.is_valid(root_id):
            warnings.append(f"Unit '{root_id}' is excluded (invalid hierarchy)")
        return ServiceResult(
            ok=True,
            op="unit_tree",
            data={"count": len(items), "items": items},
            warnings=warnings,
        )
