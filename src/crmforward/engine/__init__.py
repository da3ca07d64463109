"""Forwarding engine and the CRM plugin entry points.

Exports:
- EventForwarder: the generic decode/ensure/build/serialize/write pipeline
- CrmPlugin and its Azure variants: what the CRM host instantiates
"""

from crmforward.engine.crm_plugins import AzureBlobCrmPlugin, AzureQueueCrmPlugin, CrmPlugin
from crmforward.engine.forwarder import EventForwarder, TargetSource

__all__ = [
    "AzureBlobCrmPlugin",
    "AzureQueueCrmPlugin",
    "CrmPlugin",
    "EventForwarder",
    "TargetSource",
]
