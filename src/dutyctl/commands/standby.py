"""Command group: supernumerary (standby) accounting."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyGroup
from dutyctl.services.standby import StandbyService

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext


@click.group(
    cls=DutyGroup,
    examples="""\
  dutyctl standby expected guard 2026-03-01 2026-03-20""",
)
@click.pass_obj
def standby(app: AppContext) -> None:
    """Standby slots needed to cover a date window."""


@standby.command(
    examples="""\
  dutyctl standby expected guard 2026-03-01 2026-03-20
  dutyctl -v standby expected guard 2026-03-01 2026-03-31
  dutyctl --json standby expected guard 2026-03-01 2026-03-01"""
)
@click.argument("duty_type_id")
@click.argument("start", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.argument("end", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.pass_obj
def expected(app: AppContext, duty_type_id: str, start: datetime, end: datetime) -> None:
    """Standby slots DUTY_TYPE_ID needs from START to END (both inclusive)."""
    app.emit(StandbyService(app.roster).expected(duty_type_id, start.date(), end.date()))
