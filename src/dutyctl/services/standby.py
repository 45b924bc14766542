"""StandbyService: supernumerary slot accounting for one duty type."""

from __future__ import annotations

from datetime import date

from dutyctl.domain.standby import period_length_days, plan_standby
from dutyctl.services.base import BaseService
from dutyctl.services.result import ErrorCode, ServiceResult, failure, not_found
from dutyctl.services.telemetry import traced


class StandbyService(BaseService):
    """Answers "how many standby slots does this duty need over this window"."""

    @traced
    def expected(self, duty_type_id: str, period_start: date, period_end: date) -> ServiceResult:
        snapshot = self._snapshot()
        duty_type = snapshot.duty_types.get(duty_type_id)
        if duty_type is None:
            return not_found("expected_standby", "duty_type_id", duty_type_id)
        if period_end < period_start:
            return failure(
                "expected_standby",
                ErrorCode.INVALID_PERIOD,
                f"Period end {period_end} is before start {period_start}",
                start=period_start.isoformat(),
                end=period_end.isoformat(),
            )

        plan = plan_standby(duty_type, period_start, period_end)
        config = duty_type.supernumerary
        warnings: list[str] = []
        if config is None:
            warnings.append(f"Duty type '{duty_type.id}' has no supernumerary configuration")
        return ServiceResult(
            ok=True,
            op="expected_standby",
            data={
                "duty_type_id": duty_type.id,
                "start": period_start.isoformat(),
                "end": period_end.isoformat(),
                "days": period_length_days(period_start, period_end),
                "slots": plan.slots,
                "slots_per_period": plan.slots_per_period,
                "period_days": config.period_days if config else None,
                "standby_value": plan.standby_value,
                "periods": [[s.isoformat(), e.isoformat()] for s, e in plan.periods],
            },
            warnings=warnings,
        )
