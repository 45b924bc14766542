"""Command modules for dutyctl.

Modules are imported inside :func:`register_commands` so that importing
the CLI entry point stays cheap.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click

# (module, attribute) for each top-level command.
_COMMANDS: tuple[tuple[str, str], ...] = (
    ("scope", "scope"),
    ("eligibility", "eligibility"),
    ("fairness", "fairness"),
    ("standby", "standby"),
    ("roles", "roles"),
    ("check", "check"),
)


def register_commands(cli: click.Group) -> None:
    """Attach the five command groups and the standalone ``check`` command."""
    for module_name, attr in _COMMANDS:
        module = import_module(f"dutyctl.commands.{module_name}")
        cli.add_command(getattr(module, attr))
