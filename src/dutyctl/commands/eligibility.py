"""Command group: duty eligibility."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyGroup
from dutyctl.services.eligibility import EligibilityService

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext

_ELIGIBILITY_EXAMPLES = """\
  dutyctl eligibility check P-001 guard
  dutyctl eligibility roster guard
  dutyctl -q eligibility roster guard"""


@click.group(cls=DutyGroup, examples=_ELIGIBILITY_EXAMPLES)
@click.pass_obj
def eligibility(app: AppContext) -> None:
    """Check who may be rostered for a duty type."""


@eligibility.command(
    examples="""\
  dutyctl eligibility check P-001 guard
  dutyctl --json eligibility check P-001 guard"""
)
@click.argument("personnel_id")
@click.argument("duty_type_id")
@click.pass_obj
def check(app: AppContext, personnel_id: str, duty_type_id: str) -> None:
    """Is PERSONNEL_ID eligible for DUTY_TYPE_ID?"""
    app.emit(EligibilityService(app.roster).check(personnel_id, duty_type_id))


@eligibility.command(
    examples="""\
  dutyctl eligibility roster guard
  dutyctl --json eligibility roster guard"""
)
@click.argument("duty_type_id")
@click.pass_obj
def roster(app: AppContext, duty_type_id: str) -> None:
    """Eligible personnel for DUTY_TYPE_ID, lowest duty score first."""
    app.emit(EligibilityService(app.roster).roster(duty_type_id))
