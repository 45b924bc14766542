"""Supernumerary (standby) slot accounting.

A duty type with a supernumerary configuration reserves
``slots_per_period`` standby slots for every ``period_days`` window.
A partial trailing window still gets a full allotment, so coverage is
never under-provisioned.

Windows are counted in whole days, inclusive of both ends: 1 Jan to
20 Jan is 20 days.
"""

from __future__ import annotations

import math
from datetime import date, timedelta

from pydantic import BaseModel, Field

from dutyctl.domain.models import DutyType


class StandbyPlan(BaseModel):
    """Standby allotment for one duty type over one window."""

    model_config = {"frozen": True}

    duty_type_id: str
    slots: int
    periods: list[tuple[date, date]] = Field(default_factory=list)
    slots_per_period: int = 0
    standby_value: float = 0.0


def period_length_days(period_start: date, period_end: date) -> int:
    """Inclusive day count of a window; 0 when *period_end* precedes *period_start*."""
    return max(0, (period_end - period_start).days + 1)


def expected_standby_slots(duty_type: DutyType, period_start: date, period_end: date) -> int:
    """Standby slots *duty_type* needs between the two dates (inclusive)."""
    config = duty_type.supernumerary
    if config is None:
        return 0
    days = period_length_days(period_start, period_end)
    return config.slots_per_period * math.ceil(days / config.period_days)


def standby_periods(
    duty_type: DutyType,
    period_start: date,
    period_end: date,
) -> list[tuple[date, date]]:
    """Consecutive standby windows covering the range; the last is clipped."""
    config = duty_type.supernumerary
    if config is None:
        return []
    windows: list[tuple[date, date]] = []
    step = timedelta(days=config.period_days)
    cursor = period_start
    while cursor <= period_end:
        window_end = min(cursor + step - timedelta(days=1), period_end)
        windows.append((cursor, window_end))
        cursor += step
    return windows


def plan_standby(duty_type: DutyType, period_start: date, period_end: date) -> StandbyPlan:
    """Slots, windows, and the (untouched) standby credit for *duty_type*."""
    config = duty_type.supernumerary
    if config is None:
        return StandbyPlan(duty_type_id=duty_type.id, slots=0)
    return StandbyPlan(
        duty_type_id=duty_type.id,
        slots=expected_standby_slots(duty_type, period_start, period_end),
        periods=standby_periods(duty_type, period_start, period_end),
        slots_per_period=config.slots_per_period,
        standby_value=config.standby_value,
    )
