# src/crmforward/plugins/context.py
"""Plugin execution services.

PluginServices carries everything a CRM plugin needs during one invocation:
the change event, the host tracing service, and a factory for querying the
originating CRM system. The host builds it; tests build it from stand-ins.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

from crmforward.core.logging import get_logger

if TYPE_CHECKING:
    from crmforward.contracts import ExecutionContext
    from crmforward.plugins.protocols import OrganizationService, TracingService


@dataclass(frozen=True)
class PluginServices:
    """Typed collaborators for one plugin invocation.

    Attributes:
        execution_context: The change event.
        tracing_service: Host tracing sink.
        organization_service_factory: Creates an organization service acting
            as the given user.
    """

    execution_context: ExecutionContext
    tracing_service: TracingService
    organization_service_factory: Callable[[UUID], OrganizationService]

    def create_organization_service(self, user_id: UUID) -> OrganizationService:
        return self.organization_service_factory(user_id)


class LoggingTracingService:
    """Tracing service that writes trace lines to structlog.

    Used when forwarding outside the CRM host (CLI replay).
    """

    def __init__(self, logger_name: str = "crmforward.trace") -> None:
        self._logger = get_logger(logger_name)

    def trace(self, message: str, *args: Any) -> None:
        self._logger.warning(message % args if args else message)
