"""CheckService: structural and referential integrity of a roster.

Single command following the linter pattern. Four categories:
hierarchy structure, personnel references, duty type configuration,
role assignments. Nothing here modifies data.
"""

from __future__ import annotations

from collections import Counter
from typing import Any

from dutyctl.domain.eligibility import duty_type_diagnostics
from dutyctl.domain.ranks import is_known_rank
from dutyctl.domain.roles import is_manager_role
from dutyctl.domain.types import RoleName
from dutyctl.infrastructure.hierarchy.store import RosterSnapshot
from dutyctl.services.base import BaseService
from dutyctl.services.result import ServiceResult
from dutyctl.services.telemetry import trace_span, traced

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_HIERARCHY = "hierarchy"
CAT_PERSONNEL = "personnel"
CAT_DUTY_TYPES = "duty_types"
CAT_ROLES = "roles"

_SEVERITY_RANK = {SEVERITY_WARNING: 0, SEVERITY_ERROR: 1}


def _issue(category: str, severity: str, kind: str, subject: str, message: str) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "kind": kind,
        "id": subject,
        "message": message,
    }


class CheckService(BaseService):
    """Reports integrity issues in the current snapshot."""

    @traced
    def validate_hierarchy(self) -> ServiceResult:
        """Structural hierarchy errors only."""
        errors = self._roster.store.validate_hierarchy()
        return ServiceResult(
            ok=True,
            op="validate_hierarchy",
            data={
                "count": len(errors),
                "errors": [e.model_dump(mode="json") for e in errors],
            },
        )

    @traced
    def check(self, *, min_severity: str = SEVERITY_WARNING) -> ServiceResult:
        """Report every issue at or above *min_severity*."""
        snapshot = self._snapshot()
        issues: list[dict[str, Any]] = []
        with trace_span(CAT_HIERARCHY):
            issues.extend(self._check_hierarchy(snapshot))
        with trace_span(CAT_PERSONNEL):
            issues.extend(self._check_personnel(snapshot))
        with trace_span(CAT_DUTY_TYPES):
            issues.extend(self._check_duty_types(snapshot))
        with trace_span(CAT_ROLES):
            issues.extend(self._check_roles(snapshot))

        threshold = _SEVERITY_RANK.get(min_severity, 0)
        shown = [i for i in issues if _SEVERITY_RANK[i["severity"]] >= threshold]
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": shown,
                "count": len(shown),
                "errors": sum(1 for i in shown if i["severity"] == SEVERITY_ERROR),
            },
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @staticmethod
    def _check_hierarchy(snapshot: RosterSnapshot) -> list[dict[str, Any]]:
        hierarchy = snapshot.hierarchy
        issues = [
            _issue(CAT_HIERARCHY, SEVERITY_ERROR, str(e.kind), e.unit_id, e.message)
            for e in hierarchy.errors
        ]
        reported = {e.unit_id for e in hierarchy.errors}
        for unit_id in sorted(hierarchy.excluded_ids - reported):
            issues.append(
                _issue(
                    CAT_HIERARCHY,
                    SEVERITY_WARNING,
                    "excluded_descendant",
                    unit_id,
                    f"Unit '{unit_id}' sits under an invalid unit and is excluded",
                )
            )
        return issues

    def _check_personnel(self, snapshot: RosterSnapshot) -> list[dict[str, Any]]:
        hierarchy = snapshot.hierarchy
        vocabulary = self._vocabulary
        issues: list[dict[str, Any]] = []
        for person in sorted(snapshot.personnel.values(), key=lambda p: p.id):
            if hierarchy.get(person.unit_id) is None:
                issues.append(
                    _issue(
                        CAT_PERSONNEL,
                        SEVERITY_ERROR,
                        "unknown_unit",
                        person.id,
                        f"Personnel '{person.id}' assigned to unknown unit '{person.unit_id}'",
                    )
                )
            elif not hierarchy.is_valid(person.unit_id):
                issues.append(
                    _issue(
                        CAT_PERSONNEL,
                        SEVERITY_WARNING,
                        "excluded_unit",
                        person.id,
                        f"Personnel '{person.id}' is in excluded unit '{person.unit_id}'",
                    )
                )
            if not is_known_rank(person.rank, vocabulary):
                issues.append(
                    _issue(
                        CAT_PERSONNEL,
                        SEVERITY_WARNING,
                        "unknown_rank",
                        person.id,
                        f"Personnel '{person.id}' has rank '{person.rank}' outside the vocabulary",
                    )
                )
        return issues

    def _check_duty_types(self, snapshot: RosterSnapshot) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        for duty_type in sorted(snapshot.duty_types.values(), key=lambda d: d.id):
            if snapshot.hierarchy.get(duty_type.unit_id) is None:
                issues.append(
                    _issue(
                        CAT_DUTY_TYPES,
                        SEVERITY_ERROR,
                        "unknown_unit",
                        duty_type.id,
                        f"Duty type '{duty_type.id}' defined for unknown unit"
                        f" '{duty_type.unit_id}'",
                    )
                )
            for problem in duty_type_diagnostics(duty_type, self._vocabulary):
                issues.append(
                    _issue(
                        CAT_DUTY_TYPES,
                        SEVERITY_WARNING,
                        str(problem.kind),
                        duty_type.id,
                        problem.message,
                    )
                )
        return issues

    @staticmethod
    def _check_roles(snapshot: RosterSnapshot) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        managers: Counter[str] = Counter()
        for role in snapshot.roles:
            subject = role.principal_id or role.role_name
            parsed = role.role
            if parsed is None:
                issues.append(
                    _issue(
                        CAT_ROLES,
                        SEVERITY_WARNING,
                        "unknown_role",
                        subject,
                        f"Unknown role name '{role.role_name}' grants no access",
                    )
                )
                continue
            if role.scope_unit_id is None and parsed is not RoleName.GLOBAL_ADMIN:
                issues.append(
                    _issue(
                        CAT_ROLES,
                        SEVERITY_WARNING,
                        "null_scope",
                        subject,
                        f"Role '{role.role_name}' has no scope unit and grants no access",
                    )
                )
            elif (
                role.scope_unit_id is not None
                and snapshot.hierarchy.get(role.scope_unit_id) is None
            ):
                issues.append(
                    _issue(
                        CAT_ROLES,
                        SEVERITY_ERROR,
                        "unknown_unit",
                        subject,
                        f"Role '{role.role_name}' scoped to unknown unit '{role.scope_unit_id}'",
                    )
                )
            if is_manager_role(parsed) and role.principal_id is not None:
                managers[role.principal_id] += 1

        for principal_id, count in sorted(managers.items()):
            if count > 1:
                issues.append(
                    _issue(
                        CAT_ROLES,
                        SEVERITY_WARNING,
                        "multiple_manager_roles",
                        principal_id,
                        f"Principal '{principal_id}' holds {count} manager roles (expected one)",
                    )
                )
        return issues
