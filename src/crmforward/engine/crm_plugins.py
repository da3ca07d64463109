# src/crmforward/engine/crm_plugins.py
"""CRM plugin entry points.

The CRM host constructs a plugin once per registered step, passing the
step's unsecure and secure configuration strings, then calls execute() for
every matching data-change event, possibly from several threads at once.

A plugin instance only holds immutable, decoded configuration. Every
execute() call builds its own sink (and with it its own storage clients),
so concurrent invocations share no mutable state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from crmforward.engine.forwarder import EventForwarder, TargetSource
from crmforward.plugins.config_base import PluginSettings, parse_unsecure_config
from crmforward.plugins.manager import PluginManager

if TYPE_CHECKING:
    from crmforward.contracts import SinkWriteDescriptor
    from crmforward.plugins.context import PluginServices

_plugin_manager_cache: PluginManager | None = None


def _get_plugin_manager() -> PluginManager:
    """Get initialized plugin manager (singleton).

    Registration is read-only after startup, so sharing it across
    invocations is safe.
    """
    global _plugin_manager_cache

    if _plugin_manager_cache is None:
        manager = PluginManager()
        manager.register_builtin_plugins()
        _plugin_manager_cache = manager
    return _plugin_manager_cache


class CrmPlugin:
    """Base for CRM plugins that forward a change event to one sink.

    Subclasses set sink_name, target_source, and label.

    Args:
        unsecure_config: Optional JSON object of sink options.
        secure_config: JSON {"AccountName": ..., "Key": ...}.
        plugin_manager: Sink registry; defaults to the built-in plugins.

    Raises:
        ConfigError: If either configuration string cannot be decoded. No
            sink is created and nothing touches the network.
    """

    sink_name: ClassVar[str]
    target_source: ClassVar[TargetSource]
    label: ClassVar[str]

    def __init__(
        self,
        unsecure_config: str | None = None,
        secure_config: str | None = None,
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._settings = PluginSettings.from_secure_config(secure_config)
        self._options = parse_unsecure_config(unsecure_config)
        self._plugin_manager = plugin_manager or _get_plugin_manager()

        # Reject bad sink options at registration time. Sinks create no
        # storage clients until first used, so this touches no network.
        self._plugin_manager.create_sink(self.sink_name, self.sink_config()).close()

    @property
    def settings(self) -> PluginSettings:
        return self._settings

    def sink_config(self) -> dict[str, Any]:
        """Sink configuration: sink options plus the decoded credentials."""
        return {
            **self._options,
            "account_name": self._settings.account_name,
            "account_key": self._settings.key.get_secret_value(),
        }

    def execute(self, services: PluginServices) -> SinkWriteDescriptor | None:
        """Forward the invocation's change event to this plugin's sink."""
        sink = self._plugin_manager.create_sink(self.sink_name, self.sink_config())
        try:
            forwarder = EventForwarder(sink, label=self.label, target_source=self.target_source)
            return forwarder.forward(services)
        finally:
            sink.close()


class AzureBlobCrmPlugin(CrmPlugin):
    """Store each changed record as a JSON blob keyed by entity and id.

    Reads the record from the "Target" pre-image, so it works for Delete
    messages, and resolves the initiating user's full name for the blob
    metadata.
    """

    sink_name = "azure_blob"
    target_source = "pre_image"
    label = "Sandboxable Sample Azure Blob CRM Plugin"


class AzureQueueCrmPlugin(CrmPlugin):
    """Enqueue each changed record as a JSON message.

    Reads the record from the "Target" input parameter (Create/Update).
    """

    sink_name = "azure_queue"
    target_source = "input_parameters"
    label = "Sandboxable Sample Azure Queue CRM Plugin"
