"""Exceptions that cross the boundary between a plugin and the CRM host.

Two failure kinds reach the host:

- OrganizationServiceFault: the CRM backend reported a fault while the
  plugin was querying it. The forwarder converts it to PluginExecutionError
  with a fixed message, so the host shows a plugin-level error instead of
  the raw backend fault.
- Anything else (configuration decode, serialization, storage SDK errors):
  traced to the host tracing service and re-raised unchanged.
"""

from __future__ import annotations


class OrganizationServiceFault(Exception):
    """Raised by an organization service when the CRM backend reports a fault.

    Attributes:
        error_code: Backend fault code, when the backend supplied one.
    """

    def __init__(self, message: str, *, error_code: int | None = None) -> None:
        super().__init__(message)
        self.error_code = error_code


class PluginExecutionError(Exception):
    """Plugin-level failure reported to the CRM host.

    The host aborts the operation and shows this message to the user.
    The originating fault is kept as __cause__.
    """
