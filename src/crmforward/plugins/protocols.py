# src/crmforward/plugins/protocols.py
"""Protocol definitions for sinks and host services.

These define the interface contracts. Runtime discovery of sinks uses the
BaseSink class (issubclass checks); the protocols are for type checking and
for the host-supplied collaborators, which are never our classes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from crmforward.contracts import Entity, ForwardedMessage, SinkWriteDescriptor


@runtime_checkable
class SinkProtocol(Protocol):
    """Protocol for sink plugins: where a forwarded message is written.

    One sink instance serves exactly one invocation. Call order:

        ensure_ready() -> destination_for() / metadata_for() -> write() -> close()

    Example:
        class FileSink(BaseSink):
            name = "file"

            def ensure_ready(self) -> None:
                self._root.mkdir(exist_ok=True)

            def destination_for(self, message: ForwardedMessage) -> str:
                return f"{message.logical_name}/{message.id}.json"

            def metadata_for(self, message: ForwardedMessage) -> dict[str, str]:
                return {}

            def write(self, destination: str, body: str, metadata: dict[str, str]) -> SinkWriteDescriptor:
                ...
    """

    name: str
    plugin_version: str
    requires_user_full_name: bool
    json_indent: int | None

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize with configuration."""
        ...

    def ensure_ready(self) -> None:
        """Create the container or queue if it does not exist yet (idempotent)."""
        ...

    def destination_for(self, message: ForwardedMessage) -> str:
        """Return the destination identifier for a message."""
        ...

    def metadata_for(self, message: ForwardedMessage) -> dict[str, str]:
        """Return metadata stored alongside the message (may be empty)."""
        ...

    def write(self, destination: str, body: str, metadata: dict[str, str]) -> SinkWriteDescriptor:
        """Write one serialized message."""
        ...

    def close(self) -> None:
        """Release clients."""
        ...


@runtime_checkable
class TracingService(Protocol):
    """Host tracing sink shown to CRM administrators when a step fails.

    Uses %-style formatting: trace("%s: %s", label, detail).
    """

    def trace(self, message: str, *args: Any) -> None: ...


@runtime_checkable
class OrganizationService(Protocol):
    """Query access to the originating CRM system.

    Raises OrganizationServiceFault when the backend reports a fault.
    """

    def retrieve(self, entity_name: str, id: UUID, columns: Sequence[str]) -> Entity: ...
