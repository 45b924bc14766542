"""Change notifications and extension hooks (pluggy)."""

from dutyctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
