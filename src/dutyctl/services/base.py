"""BaseService: foundation for all dutyctl services.

Every service receives a :class:`Roster` at construction time. Each
public method reads the roster snapshot exactly once and answers from
it, so a concurrent rebuild never changes an answer half-way through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dutyctl.infrastructure.hierarchy.store import RosterSnapshot
    from dutyctl.infrastructure.roster import Roster


class BaseService:
    """Base for service-layer classes.

    Usage::

        class FairnessService(BaseService):
            def report(self, ...) -> ServiceResult:
                snapshot = self._snapshot()
                ...
    """

    def __init__(self, roster: Roster) -> None:
        self._roster = roster

    def _snapshot(self) -> RosterSnapshot:
        return self._roster.snapshot

    @property
    def _vocabulary(self) -> Sequence[str]:
        return self._roster.vocabulary
