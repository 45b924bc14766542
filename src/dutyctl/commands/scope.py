"""Command group: who can see what."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from dutyctl.commands._base import DutyGroup
from dutyctl.services.scope import ScopeService

if TYPE_CHECKING:
    from dutyctl.commands._context import AppContext

_SCOPE_EXAMPLES = """\
  dutyctl scope role company-manager --unit C1
  dutyctl scope role global-admin
  dutyctl scope principal user-17
  dutyctl scope tree
  dutyctl scope tree C1"""


@click.group(cls=DutyGroup, examples=_SCOPE_EXAMPLES)
@click.pass_obj
def scope(app: AppContext) -> None:
    """Resolve visibility scopes over the unit hierarchy."""


@scope.command(
    examples="""\
  dutyctl scope role company-manager --unit C1
  dutyctl scope role org-admin --unit B
  dutyctl --json scope role global-admin"""
)
@click.argument("role_name")
@click.option("--unit", "unit_id", default=None, help="Unit the role is scoped to.")
@click.pass_obj
def role(app: AppContext, role_name: str, unit_id: str | None) -> None:
    """Units and personnel visible to ROLE_NAME scoped at --unit."""
    app.emit(ScopeService(app.roster).resolve(role_name, unit_id))


@scope.command(
    examples="""\
  dutyctl scope principal user-17
  dutyctl -q scope principal user-17"""
)
@click.argument("principal_id")
@click.pass_obj
def principal(app: AppContext, principal_id: str) -> None:
    """Union of the scopes of every role PRINCIPAL_ID holds."""
    app.emit(ScopeService(app.roster).resolve_principal(principal_id))


@scope.command(
    examples="""\
  dutyctl scope tree
  dutyctl scope tree C1"""
)
@click.argument("root_id", required=False)
@click.pass_obj
def tree(app: AppContext, root_id: str | None) -> None:
    """Show the unit hierarchy, optionally from ROOT_ID down."""
    app.emit(ScopeService(app.roster).tree(root_id))
