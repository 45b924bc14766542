"""FairnessService: duty-load statistics for a scope."""

from __future__ import annotations

from typing import Any

from dutyctl.domain.fairness import (
    RankedPersonnel,
    compute_fairness,
    fairness_band,
    highest,
    lowest,
)
from dutyctl.domain.models import RoleAssignment
from dutyctl.domain.types import RoleName
from dutyctl.services.base import BaseService
from dutyctl.services.result import ErrorCode, ServiceResult, failure, not_found
from dutyctl.services.scope import ScopeResult, resolve_principal_scope, resolve_scope
from dutyctl.services.telemetry import trace_span, traced


def _rows(ranked: list[RankedPersonnel]) -> list[dict[str, Any]]:
    return [r.model_dump() for r in ranked]


class FairnessService(BaseService):
    """Computes the fairness index over whatever population a caller may see."""

    @traced
    def report(
        self,
        *,
        unit_id: str | None = None,
        principal_id: str | None = None,
        top: int | None = None,
    ) -> ServiceResult:
        """Fairness over a unit subtree, a principal's scope, or everyone.

        *unit_id* and *principal_id* are mutually exclusive; with neither,
        the whole roster is measured.
        """
        if unit_id is not None and principal_id is not None:
            return failure(
                "fairness_report",
                ErrorCode.INVALID_ARGUMENTS,
                "Pass either a unit or a principal, not both",
            )

        snapshot = self._snapshot()
        settings = self._roster.settings.fairness

        scope: ScopeResult
        if unit_id is not None:
            if snapshot.hierarchy.get(unit_id) is None:
                return not_found("fairness_report", "unit_id", unit_id)
            # Any subtree-scoped role gives the plain subtree.
            scope = resolve_scope(
                snapshot,
                RoleAssignment(role_name=RoleName.STANDARD_USER, scope_unit_id=unit_id),
            )
        elif principal_id is not None:
            scope = resolve_principal_scope(snapshot, snapshot.roles_for(principal_id))
        else:
            scope = resolve_scope(snapshot, RoleAssignment(role_name=RoleName.GLOBAL_ADMIN))

        people = [snapshot.personnel[pid] for pid in sorted(scope.personnel_ids)]
        with trace_span("statistics"):
            stats = compute_fairness(
                (p.duty_score for p in people),
                max_expected_std_dev=settings.max_expected_std_dev,
            )

        n = settings.top_n if top is None else top
        warnings = [e.message for e in scope.errors]
        warnings.extend(
            f"Unit '{uid}' excluded from scope (invalid hierarchy)"
            for uid in sorted(scope.excluded_unit_ids)
        )
        return ServiceResult(
            ok=True,
            op="fairness_report",
            data={
                "unit_id": unit_id,
                "principal_id": principal_id,
                "count": stats.count,
                "mean": round(stats.mean, 4),
                "std_dev": round(stats.std_dev, 4),
                "fairness_index": round(stats.fairness_index, 2),
                "band": fairness_band(
                    stats.fairness_index,
                    good=settings.good_threshold,
                    fair=settings.fair_threshold,
                ),
                "highest": _rows(highest(people, n)),
                "lowest": _rows(lowest(people, n)),
            },
            warnings=warnings,
        )

