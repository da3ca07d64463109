# src/crmforward/plugins/manager.py
"""Plugin manager for sink discovery, registration, and lookup.

Uses pluggy for hook-based plugin registration.
"""

from typing import Any

import pluggy

from crmforward.plugins.hookspecs import PROJECT_NAME, CrmForwardSinkSpec
from crmforward.plugins.protocols import SinkProtocol


class PluginManager:
    """Manages sink discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        sink_cls = manager.get_sink_by_name("azure_blob")
        sink = manager.create_sink("azure_blob", config)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CrmForwardSinkSpec)

        # Cache - map name to plugin class for duplicate detection
        self._sinks: dict[str, type[SinkProtocol]] = {}

    def register_builtin_plugins(self) -> None:
        """Discover and register all built-in sinks.

        Call this once at startup to make built-in sinks discoverable.
        """
        from crmforward.plugins.discovery import create_dynamic_hookimpl, discover_all_sinks

        self.register(create_dynamic_hookimpl(discover_all_sinks(), "crmforward_get_sinks"))

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods
        """
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Refresh plugin caches from hooks.

        Raises:
            ValueError: If a sink with the same name is already registered
        """
        new_sinks: dict[str, type[SinkProtocol]] = {}

        for sinks in self._pm.hook.crmforward_get_sinks():
            for cls in sinks:
                name = cls.name
                if name in new_sinks:
                    raise ValueError(f"Duplicate sink plugin name: '{name}'. Already registered by {new_sinks[name].__name__}")
                new_sinks[name] = cls

        self._sinks = new_sinks

    def get_sinks(self) -> list[type[SinkProtocol]]:
        """Get all registered sink plugins."""
        return list(self._sinks.values())

    def get_sink_by_name(self, name: str) -> type[SinkProtocol] | None:
        """Get sink plugin by name."""
        return self._sinks.get(name)

    def create_sink(self, name: str, config: dict[str, Any]) -> SinkProtocol:
        """Instantiate a registered sink.

        Raises:
            ValueError: If no sink is registered under the name.
            PluginConfigError: If the sink rejects the configuration.
        """
        sink_cls = self.get_sink_by_name(name)
        if sink_cls is None:
            available = ", ".join(sorted(self._sinks)) or "(none)"
            raise ValueError(f"Unknown sink plugin: '{name}'. Available: {available}")
        return sink_cls(config)
