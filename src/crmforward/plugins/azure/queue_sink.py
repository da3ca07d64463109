# src/crmforward/plugins/azure/queue_sink.py
"""Azure Queue Storage sink plugin for crmforward.

Enqueues one message per forwarded change on a fixed queue. Unlike the blob
sink there is no natural-key overwrite: every invocation appends a new
message, duplicates included. Consumers deduplicate on (LogicalName, Id)
if they need to.

Message text is base64 encoded by default, matching what the classic .NET
storage client put on the wire.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from azure.core.exceptions import ResourceExistsError
from pydantic import Field

from crmforward.contracts import ForwardedMessage, SinkWriteDescriptor
from crmforward.core.logging import get_logger
from crmforward.plugins.azure.auth import AzureStorageConfig
from crmforward.plugins.base import BaseSink

if TYPE_CHECKING:
    from azure.storage.queue import QueueClient

logger = get_logger(__name__)

QUEUE_NAME = "samplecrmqueue"


class AzureQueueSinkConfig(AzureStorageConfig):
    """Configuration for Azure Queue sink plugin."""

    message_encoding: Literal["base64", "text"] = Field(
        default="base64",
        description="Wire encoding of message text",
    )


class AzureQueueSink(BaseSink):
    """Enqueue forwarded changes on an Azure Storage queue.

    Config options:
        - account_name / account_key: storage account credentials (required)
        - endpoint_suffix: storage DNS suffix. Default: core.windows.net
        - message_encoding: "base64" or "text". Default: "base64"

    The queue name is fixed (samplecrmqueue) and created on first use.
    """

    name = "azure_queue"
    plugin_version = "1.0.0"
    requires_user_full_name = False
    json_indent = 2

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        cfg = AzureQueueSinkConfig.from_dict(config)

        self._storage = cfg
        self._queue = QUEUE_NAME
        self._base64_messages = cfg.message_encoding == "base64"

        self._queue_client: QueueClient | None = None

    @property
    def queue(self) -> str:
        return self._queue

    def _get_queue_client(self) -> QueueClient:
        if self._queue_client is None:
            self._queue_client = self._storage.create_queue_client(self._queue, base64_messages=self._base64_messages)
        return self._queue_client

    def ensure_ready(self) -> None:
        """Create the queue if it does not exist yet."""
        queue_client = self._get_queue_client()
        try:
            queue_client.create_queue()
        except ResourceExistsError:
            logger.debug("Queue already exists", queue=self._queue)
        else:
            logger.info("Created queue", queue=self._queue)

    def destination_for(self, message: ForwardedMessage) -> str:
        return self._queue

    def write(self, destination: str, body: str, metadata: dict[str, str]) -> SinkWriteDescriptor:
        """Send the JSON body as one queue message.

        Queues carry no per-message metadata; metadata is ignored.

        Raises:
            azure.core.exceptions.*: On Azure SDK errors (propagated unchanged).
        """
        sent = self._get_queue_client().send_message(body)

        descriptor = SinkWriteDescriptor.for_body(
            sink=self.name,
            uri=f"azure-queue://{destination}/{sent.id}",
            body=body.encode("utf-8"),
        )
        logger.info(
            "Enqueued change message",
            queue=destination,
            message_id=sent.id,
            size_bytes=descriptor.size_bytes,
        )
        return descriptor

    def close(self) -> None:
        """Release resources."""
        self._queue_client = None
