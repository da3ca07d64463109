# src/crmforward/plugins/azure/auth.py
"""Azure Storage account-key authentication for crmforward sinks.

Both sinks authenticate with a storage account name and its access key,
taken from the CRM plugin's secure configuration. The service endpoint is
derived from the lower-cased account name:

    https://{account}.blob.{endpoint_suffix}
    https://{account}.queue.{endpoint_suffix}

IMPORTANT: the account key is a secret. It is held as a SecretStr and never
logged or included in error messages.
"""

from __future__ import annotations

from typing import Literal

from azure.core.credentials import AzureNamedKeyCredential
from azure.storage.blob import BlobServiceClient
from azure.storage.queue import QueueClient, TextBase64EncodePolicy
from pydantic import Field, SecretStr, field_validator

from crmforward.plugins.config_base import PluginConfig

StorageService = Literal["blob", "queue"]

DEFAULT_ENDPOINT_SUFFIX = "core.windows.net"


class AzureStorageConfig(PluginConfig):
    """Storage account credentials shared by the Azure sinks.

    Example configuration:

        account_name: "acct1"
        account_key: "${AZURE_STORAGE_KEY}"
        endpoint_suffix: "core.usgovcloudapi.net"  # optional
    """

    account_name: str = Field(..., description="Azure Storage account name")
    account_key: SecretStr = Field(..., description="Base64 encoded account access key")
    endpoint_suffix: str = Field(
        default=DEFAULT_ENDPOINT_SUFFIX,
        description="DNS suffix of the storage endpoints (sovereign clouds use their own)",
    )

    @field_validator("endpoint_suffix")
    @classmethod
    def validate_endpoint_suffix(cls, v: str) -> str:
        """Validate that endpoint_suffix is a bare DNS suffix."""
        if not v or not v.strip():
            raise ValueError("endpoint_suffix cannot be empty")
        if "/" in v or ":" in v:
            raise ValueError("endpoint_suffix must be a DNS suffix such as 'core.windows.net', not a URL")
        return v.strip().strip(".")

    def account_url(self, service: StorageService) -> str:
        """Return the endpoint URL for a storage service."""
        return f"https://{self.account_name.lower()}.{service}.{self.endpoint_suffix}"

    def credential(self) -> AzureNamedKeyCredential:
        return AzureNamedKeyCredential(self.account_name, self.account_key.get_secret_value())

    def create_blob_service_client(self) -> BlobServiceClient:
        """Create a BlobServiceClient for the account's blob endpoint."""
        return BlobServiceClient(self.account_url("blob"), credential=self.credential())

    def create_queue_client(self, queue_name: str, *, base64_messages: bool = True) -> QueueClient:
        """Create a QueueClient for one queue on the account's queue endpoint.

        Args:
            queue_name: Queue to address.
            base64_messages: Base64-encode message text on the wire. This is
                what the classic .NET storage client did by default, so
                existing queue consumers expect it.
        """
        if base64_messages:
            return QueueClient(
                self.account_url("queue"),
                queue_name,
                credential=self.credential(),
                message_encode_policy=TextBase64EncodePolicy(),
            )
        return QueueClient(self.account_url("queue"), queue_name, credential=self.credential())
