"""Plugin registry on top of pluggy.

Third-party plugins register under the ``dutyctl.plugins`` entry-point
group; each entry point may name a plugin object or a class, and
classes are instantiated with no arguments. A plugin that fails to load
is logged and skipped so the CLI keeps working without it.
"""

from __future__ import annotations

import inspect
from importlib import metadata

import pluggy
import structlog

from dutyctl.plugins.hookspecs import DutyctlHookSpec

PROJECT_NAME = "dutyctl"
ENTRY_POINT_GROUP = "dutyctl.plugins"

log = structlog.get_logger(__name__)


class PluginManager(pluggy.PluginManager):
    """pluggy manager preloaded with the dutyctl hook specifications."""

    def __init__(self) -> None:
        super().__init__(PROJECT_NAME)
        self.add_hookspecs(DutyctlHookSpec)
        self.is_loaded = False
        self.failed: list[str] = []

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin*, named after its class unless *name* is given."""
        name = name or type(plugin).__name__
        self.register(plugin, name=name)
        log.debug("plugin.registered", plugin=name)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins once; returns every registered name."""
        if not self.is_loaded:
            for entry_point in metadata.entry_points(group=ENTRY_POINT_GROUP):
                self._load_entry_point(entry_point)
            self._instantiate_classes()
            self.is_loaded = True
        return self.list_plugin_names()

    def list_plugin_names(self) -> list[str]:
        return [self.get_name(p) or type(p).__name__ for p in self.get_plugins()]

    def _load_entry_point(self, entry_point: metadata.EntryPoint) -> None:
        if self.get_plugin(entry_point.name) is not None or self.is_blocked(entry_point.name):
            return
        try:
            self.register(entry_point.load(), name=entry_point.name)
        except Exception as exc:
            self.failed.append(entry_point.name)
            log.warning("plugin.load_failed", plugin=entry_point.name, error=str(exc))

    def _instantiate_classes(self) -> None:
        # Hooks on a bare class would be called with ``self`` unbound.
        for plugin in list(self.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            name = self.get_name(plugin) or plugin.__name__
            self.unregister(plugin)
            try:
                instance = plugin()
            except Exception as exc:
                self.failed.append(name)
                log.warning("plugin.init_failed", plugin=name, error=str(exc))
                continue
            self.register(instance, name=name)
