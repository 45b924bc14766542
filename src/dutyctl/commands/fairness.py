"""Command group: duty-load fairness."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyGroup

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext


@click.group(
    cls=DutyGroup,
    examples="""\
  dutyctl fairness report
  dutyctl fairness report --unit C1 --top 3
  dutyctl fairness report --principal user-17""",
)
@click.pass_obj
def fairness(app: AppContext) -> None:
    """Measure how evenly duty load is spread."""


@fairness.command(
    examples="""\
  dutyctl fairness report
  dutyctl fairness report --unit C1
  dutyctl fairness report --principal user-17 --top 10
  dutyctl -q fairness report --unit C1"""
)
@click.option("--unit", "unit_id", default=None, help="Limit to a unit and its subtree.")
@click.option("--principal", "principal_id", default=None, help="Limit to a principal's scope.")
@click.option("--top", default=None, type=click.IntRange(min=0), help="Rows in each ranking.")
@click.pass_obj
def report(
    app: AppContext,
    unit_id: str | None,
    principal_id: str | None,
    top: int | None,
) -> None:
    """Fairness index with the highest- and lowest-loaded personnel."""
    from dutyctl.services.fairness import FairnessService

    svc = FairnessService(app.roster)
    app.emit(svc.report(unit_id=unit_id, principal_id=principal_id, top=top))
