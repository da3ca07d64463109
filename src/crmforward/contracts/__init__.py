"""Shared contracts for data crossing the host/plugin/sink boundaries.

This package is a leaf module: it imports nothing from core, plugins, or
engine.
"""

from crmforward.contracts.errors import OrganizationServiceFault, PluginExecutionError
from crmforward.contracts.events import (
    TARGET,
    Entity,
    EntityReference,
    ExecutionContext,
    ForwardedMessage,
    Money,
    OptionSetValue,
)
from crmforward.contracts.sink import SinkWriteDescriptor

__all__ = [
    "TARGET",
    "Entity",
    "EntityReference",
    "ExecutionContext",
    "ForwardedMessage",
    "Money",
    "OptionSetValue",
    "OrganizationServiceFault",
    "PluginExecutionError",
    "SinkWriteDescriptor",
]
