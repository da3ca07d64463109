# src/crmforward/plugins/azure/blob_sink.py
"""Azure Blob Storage sink plugin for crmforward.

Writes one JSON document per forwarded change to a fixed container. The
blob key embeds the record's natural key, so repeated or out-of-order
delivery of the same change overwrites the same blob:

    samplecrmfolder/{logical_name}/{RECORD_ID_32_HEX_UPPER}.json

Two metadata shapes are deployed and kept side by side (payload_shape):

    flat:        userid, userfullname, deletiondate
    underscored: User_ID, User_Fullname, Deletion_Date

Trust model:
    - Azure Blob SDK calls = EXTERNAL SYSTEM -> errors propagate unchanged;
      the forwarder traces them for the CRM host
    - Building keys and metadata = OUR CODE -> let it crash
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import ContentSettings
from pydantic import Field

from crmforward.contracts import ForwardedMessage, SinkWriteDescriptor
from crmforward.core.logging import get_logger
from crmforward.core.serialization import format_braced_guid, format_compact_guid, format_round_trip
from crmforward.plugins.azure.auth import AzureStorageConfig
from crmforward.plugins.base import BaseSink

if TYPE_CHECKING:
    from azure.storage.blob import ContainerClient

logger = get_logger(__name__)

CONTAINER_NAME = "samplecrmfolder"
CONTENT_TYPE = "application/json"

PayloadShape = Literal["flat", "underscored"]

# Metadata key names per payload shape: (user id, user full name, operation date)
_METADATA_KEYS: dict[str, tuple[str, str, str]] = {
    "flat": ("userid", "userfullname", "deletiondate"),
    "underscored": ("User_ID", "User_Fullname", "Deletion_Date"),
}


class AzureBlobSinkConfig(AzureStorageConfig):
    """Configuration for Azure Blob sink plugin.

    Example configuration:

        account_name: "acct1"
        account_key: "${AZURE_STORAGE_KEY}"
        payload_shape: "underscored"
    """

    payload_shape: PayloadShape = Field(
        default="flat",
        description="Metadata key naming: flat (userid, ...) or underscored (User_ID, ...)",
    )


class AzureBlobSink(BaseSink):
    """Write forwarded changes to Azure Blob Storage as JSON documents.

    Config options:
        - account_name / account_key: storage account credentials (required)
        - endpoint_suffix: storage DNS suffix. Default: core.windows.net
        - payload_shape: "flat" or "underscored" metadata keys. Default: "flat"

    The container name is fixed (samplecrmfolder) and created on first use.
    """

    name = "azure_blob"
    plugin_version = "1.0.0"
    requires_user_full_name = True
    json_indent = 2

    def __init__(self, config: dict[str, Any]) -> None:
        super().__init__(config)
        cfg = AzureBlobSinkConfig.from_dict(config)

        self._storage = cfg
        self._container = CONTAINER_NAME
        self._payload_shape: PayloadShape = cfg.payload_shape

        # Lazy-loaded client, dropped in close()
        self._container_client: ContainerClient | None = None

    @property
    def container(self) -> str:
        return self._container

    def _get_container_client(self) -> ContainerClient:
        """Get or create the Azure container client."""
        if self._container_client is None:
            service_client = self._storage.create_blob_service_client()
            self._container_client = service_client.get_container_client(self._container)
        return self._container_client

    def ensure_ready(self) -> None:
        """Create the container if it does not exist yet."""
        container_client = self._get_container_client()
        try:
            container_client.create_container()
        except ResourceExistsError:
            logger.debug("Blob container already exists", container=self._container)
        else:
            logger.info("Created blob container", container=self._container)

    def destination_for(self, message: ForwardedMessage) -> str:
        """Blob key: {logical_name}/{32 upper-case hex digits}.json."""
        return f"{message.logical_name.lower()}/{format_compact_guid(message.id)}.json"

    def metadata_for(self, message: ForwardedMessage) -> dict[str, str]:
        user_key, name_key, date_key = _METADATA_KEYS[self._payload_shape]
        return {
            user_key: format_braced_guid(message.user_id),
            name_key: message.user_full_name or "",
            date_key: format_round_trip(message.operation_created_on),
        }

    def write(self, destination: str, body: str, metadata: dict[str, str]) -> SinkWriteDescriptor:
        """Upload the JSON body, replacing any existing blob at the same key.

        Raises:
            azure.core.exceptions.*: On Azure SDK errors (propagated unchanged).
        """
        content = body.encode("utf-8")
        blob_client = self._get_container_client().get_blob_client(destination)
        blob_client.upload_blob(
            content,
            overwrite=True,
            metadata=metadata,
            content_settings=ContentSettings(content_type=CONTENT_TYPE),
        )

        descriptor = SinkWriteDescriptor.for_body(
            sink=self.name,
            uri=f"azure://{self._container}/{destination}",
            body=content,
            metadata=metadata,
        )
        logger.info(
            "Uploaded change blob",
            container=self._container,
            blob_path=destination,
            size_bytes=descriptor.size_bytes,
            content_hash=descriptor.content_hash,
        )
        return descriptor

    def close(self) -> None:
        """Release resources."""
        self._container_client = None
