"""Command: roster integrity checking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyCommand

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext


@click.command(
    cls=DutyCommand,
    examples="""\
  dutyctl check
  dutyctl check --errors-only
  dutyctl check --min-severity error
  dutyctl check --hierarchy-only
  dutyctl -s other-roster.yaml --json check""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option("--hierarchy-only", is_flag=True, help="Only list structural hierarchy errors.")
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool, hierarchy_only: bool) -> None:
    """Check the roster dataset for structural and configuration problems."""
    from dutyctl.services.check import CheckService

    svc = CheckService(app.roster)

    if hierarchy_only:
        app.emit(svc.validate_hierarchy())
    else:
        threshold = "error" if errors_only else min_severity
        app.emit(svc.check(min_severity=threshold))
