"""Command group: role assignment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyGroup
from dutyctl.services.roles import RoleService

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext


@click.group(
    cls=DutyGroup,
    examples="""\
  dutyctl roles assign user-17 company-manager --unit C2
  dutyctl roles assign user-17 company-manager --unit C2 --save""",
)
@click.pass_obj
def roles(app: AppContext) -> None:
    """Grant roles under the one-manager-role rule."""


@roles.command(
    examples="""\
  dutyctl roles assign user-17 section-manager --unit S1
  dutyctl roles assign user-17 global-admin --save
  dutyctl --json roles assign user-17 standard-user --unit C1"""
)
@click.argument("principal_id")
@click.argument("role_name")
@click.option("--unit", "unit_id", default=None, help="Unit the role is scoped to.")
@click.option("--save", is_flag=True, help="Write the new role set back to the snapshot file.")
@click.pass_obj
def assign(
    app: AppContext,
    principal_id: str,
    role_name: str,
    unit_id: str | None,
    save: bool,
) -> None:
    """Grant ROLE_NAME to PRINCIPAL_ID and show the resulting role set.

    A new manager role retires any manager role already held.
    """
    app.emit(RoleService(app.roster).assign(principal_id, role_name, unit_id, save=save))
