# src/crmforward/plugins/__init__.py
"""Plugin system: sinks via pluggy, plus the host-facing service types.

- Protocols: type contracts for sinks and host services
- BaseSink: base class every sink subclasses (used for discovery)
- Config: typed sink configuration and registration-string decoding
- PluginServices: collaborators handed to a CRM plugin per invocation
- Manager/Hookspecs: sink discovery and registration
"""

from crmforward.plugins.base import BaseSink
from crmforward.plugins.config_base import (
    ConfigError,
    PluginConfig,
    PluginConfigError,
    PluginSettings,
    parse_unsecure_config,
)
from crmforward.plugins.context import LoggingTracingService, PluginServices
from crmforward.plugins.hookspecs import hookimpl, hookspec
from crmforward.plugins.manager import PluginManager
from crmforward.plugins.protocols import OrganizationService, SinkProtocol, TracingService

__all__ = [
    "BaseSink",
    "ConfigError",
    "LoggingTracingService",
    "OrganizationService",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "PluginServices",
    "PluginSettings",
    "SinkProtocol",
    "TracingService",
    "hookimpl",
    "hookspec",
    "parse_unsecure_config",
]
