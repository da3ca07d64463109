# src/crmforward/plugins/base.py
"""Base class for sink implementations.

Sinks MUST subclass BaseSink. Plugin discovery uses issubclass() checks
against it; SinkProtocol cannot support issubclass() because it has
non-method members.

Lifecycle (driven by EventForwarder, once per CRM invocation):

    ensure_ready() -> destination_for()/metadata_for() -> write() -> close()

- SDK clients are created lazily inside the sink and dropped in close().
  Nothing is pooled or cached across invocations.
- close() is called by the CRM plugin in a finally block, even when an
  earlier step raised.
"""

from abc import ABC, abstractmethod
from typing import Any

from crmforward.contracts import ForwardedMessage, SinkWriteDescriptor


class BaseSink(ABC):
    """Base class for sink plugins.

    Subclass and implement ensure_ready(), destination_for(), metadata_for(),
    write(), close().
    """

    name: str
    plugin_version: str = "0.0.0"

    # Whether the forwarder should resolve the initiating user's display
    # name before building the message.
    requires_user_full_name: bool = False

    # Indentation passed to the JSON serializer; None for compact output.
    json_indent: int | None = 2

    def __init__(self, config: dict[str, Any]) -> None:
        """Initialize with configuration.

        Args:
            config: Plugin configuration
        """
        self.config = config

    @abstractmethod
    def ensure_ready(self) -> None:
        """Create the sink's container or queue if absent."""
        ...

    @abstractmethod
    def destination_for(self, message: ForwardedMessage) -> str:
        """Return where the message will be written."""
        ...

    def metadata_for(self, message: ForwardedMessage) -> dict[str, str]:
        """Return metadata stored with the message. Default: none."""
        return {}

    @abstractmethod
    def write(self, destination: str, body: str, metadata: dict[str, str]) -> SinkWriteDescriptor:
        """Write one serialized message.

        Returns:
            SinkWriteDescriptor with content_hash and size_bytes
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release clients."""
        ...
