"""Roster: the single dependency injected into every service.

The Roster owns the settings, the :class:`HierarchyStore`, and the plugin
manager. A file-backed roster reads its dataset from the configured
snapshot file on first access; a detached roster (built with an explicit
dataset) keeps everything in memory.

Writers persist through :meth:`Roster.save` and then call
:meth:`Roster.notify_change`; the built-in rebuild plugin answers by
reloading the dataset and publishing a fresh snapshot.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import structlog

from dutyctl.config.logging import bind_snapshot_context
from dutyctl.infrastructure.hierarchy.store import HierarchyStore
from dutyctl.infrastructure.loader import dump_dataset, load_dataset

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dutyctl.config.settings import DutySettings
    from dutyctl.domain.models import RosterDataset
    from dutyctl.infrastructure.hierarchy.store import RosterSnapshot
    from dutyctl.plugins.manager import PluginManager

log = structlog.get_logger(__name__)


class Roster:
    """Repository over one roster dataset and its published snapshots.

    Constructed once at CLI startup from :class:`DutySettings` and stored
    in ``click.Context.obj``.
    """

    def __init__(self, settings: DutySettings, dataset: RosterDataset | None = None) -> None:
        self._settings = settings
        self._store = HierarchyStore()
        self._dataset = dataset
        self._detached = dataset is not None
        self._loaded = False
        self._load_lock = threading.Lock()
        self._plugins: PluginManager | None = None

    @property
    def settings(self) -> DutySettings:
        """The resolved settings for this roster."""
        return self._settings

    @property
    def store(self) -> HierarchyStore:
        """The hierarchy store, with the first snapshot published."""
        _ = self.snapshot
        return self._store

    @property
    def vocabulary(self) -> Sequence[str]:
        """Rank vocabulary, most junior first."""
        return self._settings.ranks.vocabulary

    @property
    def detached(self) -> bool:
        """True when the dataset lives in memory rather than a file."""
        return self._detached

    @property
    def snapshot(self) -> RosterSnapshot:
        """The current snapshot, loading the dataset on first access.

        Raises:
            SnapshotError: the snapshot file cannot be read or validated.
        """
        if not self._loaded:
            with self._load_lock:
                if not self._loaded:
                    self.reload()
        return self._store.snapshot

    @property
    def dataset(self) -> RosterDataset:
        """The dataset behind the current snapshot."""
        _ = self.snapshot
        assert self._dataset is not None
        return self._dataset

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager, created with only the built-ins on first use."""
        if self._plugins is None:
            self._plugins = self._new_plugin_manager()
        return self._plugins

    def reload(self) -> RosterSnapshot:
        """Read the dataset again and publish a fresh snapshot.

        The previous snapshot stays published if loading fails.
        """
        if not self._detached:
            self._dataset = load_dataset(self._settings.resolved_snapshot)
        assert self._dataset is not None
        snapshot = self._store.rebuild(self._dataset)
        self._loaded = True
        bind_snapshot_context(
            None if self._detached else self._settings.resolved_snapshot,
            snapshot.version,
        )
        self._fire_rebuilt(snapshot)
        return snapshot

    def save(self, dataset: RosterDataset) -> None:
        """Persist *dataset* (to the snapshot file unless detached).

        Does not republish; call :meth:`notify_change` afterwards.
        """
        if self._detached:
            self._dataset = dataset
            return
        dump_dataset(dataset, self._settings.resolved_snapshot)

    def init_plugins(self) -> list[str]:
        """Create the plugin manager and discover entry-point plugins.

        Called by AppContext when the roster is first accessed.
        """
        pm = self.plugins
        return pm.discover_and_load()

    def notify_change(self, entity_type: str, entity_id: str, action: str) -> list[str]:
        """Tell plugins that an entity changed. Returns warnings.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        warnings: list[str] = []
        try:
            self.plugins.hook.post_entity_change(
                entity_type=entity_type,
                entity_id=entity_id,
                action=action,
            )
        except Exception as exc:
            log.warning(
                "plugin.dispatch_failed",
                hook="post_entity_change",
                entity_type=entity_type,
                entity_id=entity_id,
                error=str(exc),
            )
            warnings.append(f"Change notification failed for {entity_type} '{entity_id}': {exc}")
        return warnings

    def _fire_rebuilt(self, snapshot: RosterSnapshot) -> None:
        if self._plugins is None:
            return
        try:
            self._plugins.hook.post_rebuild(
                version=snapshot.version,
                unit_count=len(snapshot.hierarchy.units),
                personnel_count=len(snapshot.personnel),
                error_count=len(snapshot.hierarchy.errors),
            )
        except Exception:
            log.debug("plugin.dispatch_failed", hook="post_rebuild", exc_info=True)

    def _new_plugin_manager(self) -> PluginManager:
        from dutyctl.plugins.builtins.rebuild import RebuildPlugin
        from dutyctl.plugins.manager import PluginManager

        pm = PluginManager()
        pm.register_plugin(RebuildPlugin(self), name="rebuild-builtin")
        return pm
