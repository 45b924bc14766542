"""Pluggy hook specifications for roster change notifications.

Whatever persists units, personnel, duty types, or role assignments calls
:meth:`Roster.notify_change` afterwards; that fires ``post_entity_change``.
The built-in rebuild plugin answers it by reloading the dataset, and a
successful rebuild fires ``post_rebuild``.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("dutyctl")
hookimpl = pluggy.HookimplMarker("dutyctl")


class DutyctlHookSpec:
    """Hook specifications for the dutyctl plugin system."""

    @hookspec
    def post_entity_change(
        self,
        entity_type: str,
        entity_id: str,
        action: str,
    ) -> None:
        """Called after a unit, person, duty type, or role is created, updated, or deleted."""

    @hookspec
    def post_rebuild(
        self,
        version: int,
        unit_count: int,
        personnel_count: int,
        error_count: int,
    ) -> None:
        """Called after a new snapshot has been published."""
