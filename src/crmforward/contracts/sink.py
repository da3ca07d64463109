"""Sink write results."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SinkWriteDescriptor:
    """Descriptor for one payload written to a sink.

    Attributes:
        sink: Registered sink name (e.g. "azure_blob").
        uri: Where the payload landed, e.g. azure://container/key.
        content_hash: SHA-256 hex digest of the UTF-8 body.
        size_bytes: Length of the UTF-8 body.
        metadata: Metadata attached to the stored object, if any.
    """

    sink: str
    uri: str
    content_hash: str
    size_bytes: int
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_body(
        cls,
        *,
        sink: str,
        uri: str,
        body: bytes,
        metadata: dict[str, str] | None = None,
    ) -> SinkWriteDescriptor:
        """Create descriptor for an uploaded body, hashing it."""
        return cls(
            sink=sink,
            uri=uri,
            content_hash=hashlib.sha256(body).hexdigest(),
            size_bytes=len(body),
            metadata=dict(metadata or {}),
        )
