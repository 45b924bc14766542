"""EligibilityService: who may stand a duty, and why or why not."""

from __future__ import annotations

from typing import Any

import structlog

from dutyctl.domain.diagnostics import ConfigurationError
from dutyctl.domain.eligibility import (
    duty_type_diagnostics,
    eligible_personnel,
    is_eligible,
    meets_requirements,
    passes_rank_filter,
    passes_rank_range,
    passes_section_filter,
)
from dutyctl.domain.models import DutyType
from dutyctl.services.base import BaseService
from dutyctl.services.result import ServiceResult, not_found
from dutyctl.services.scope import descendant_units
from dutyctl.services.telemetry import traced

log = structlog.get_logger(__name__)


class EligibilityService(BaseService):
    """Evaluates duty-type filters against personnel."""

    def _diagnose(self, duty_type: DutyType) -> list[ConfigurationError]:
        issues = duty_type_diagnostics(duty_type, self._vocabulary)
        for issue in issues:
            log.warning(
                "duty_type.configuration",
                duty_type_id=issue.duty_type_id,
                kind=str(issue.kind),
                setting=issue.setting,
            )
        return issues

    @traced
    def check(self, personnel_id: str, duty_type_id: str) -> ServiceResult:
        """Explain whether one person passes each check for one duty type."""
        snapshot = self._snapshot()
        person = snapshot.personnel.get(personnel_id)
        if person is None:
            return not_found("check_eligibility", "personnel_id", personnel_id)
        duty_type = snapshot.duty_types.get(duty_type_id)
        if duty_type is None:
            return not_found("check_eligibility", "duty_type_id", duty_type_id)

        issues = self._diagnose(duty_type)
        vocabulary = self._vocabulary
        return ServiceResult(
            ok=True,
            op="check_eligibility",
            data={
                "personnel_id": person.id,
                "duty_type_id": duty_type.id,
                "eligible": is_eligible(person, duty_type, vocabulary),
                "checks": {
                    "qualifications": meets_requirements(person, duty_type),
                    "rank_filter": passes_rank_filter(person, duty_type),
                    "section_filter": passes_section_filter(person, duty_type),
                    "rank_range": passes_rank_range(person, duty_type, vocabulary),
                },
            },
            warnings=[i.message for i in issues],
        )

    @traced
    def roster(self, duty_type_id: str) -> ServiceResult:
        """Eligible people from the duty type's unit subtree, lowest score first."""
        snapshot = self._snapshot()
        duty_type = snapshot.duty_types.get(duty_type_id)
        if duty_type is None:
            return not_found("eligible_roster", "duty_type_id", duty_type_id)

        warnings = [i.message for i in self._diagnose(duty_type)]
        if not duty_type.is_active:
            warnings.append(f"Duty type '{duty_type.id}' is inactive")

        unit_ids, excluded = descendant_units(snapshot.hierarchy, duty_type.unit_id)
        warnings.extend(
            f"Unit '{uid}' excluded from roster (invalid hierarchy)" for uid in sorted(excluded)
        )
        candidates = snapshot.personnel_in(unit_ids)
        chosen = eligible_personnel(
            candidates,
            duty_type,
            unit_ids=unit_ids,
            vocabulary=self._vocabulary,
        )

        items: list[dict[str, Any]] = [
            {
                "position": position,
                "id": p.id,
                "name": p.display_name,
                "rank": p.rank,
                "unit_id": p.unit_id,
                "score": p.duty_score,
            }
            for position, p in enumerate(chosen, start=1)
        ]
        return ServiceResult(
            ok=True,
            op="eligible_roster",
            data={
                "duty_type_id": duty_type.id,
                "candidates": len(candidates),
                "count": len(items),
                "items": items,
            },
            warnings=warnings,
        )
