"""Built-in plugin: rebuild the roster snapshot after any entity change."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from dutyctl.plugins.hookspecs import hookimpl

if TYPE_CHECKING:
    from dutyctl.infrastructure.roster import Roster

log = structlog.get_logger(__name__)


class RebuildPlugin:
    """Reloads the dataset and republishes the snapshot on every change."""

    def __init__(self, roster: Roster) -> None:
        self._roster = roster

    @hookimpl
    def post_entity_change(self, entity_type: str, entity_id: str, action: str) -> None:
        log.debug("roster.change", entity_type=entity_type, entity_id=entity_id, action=action)
        self._roster.reload()
