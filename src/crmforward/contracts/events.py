"""Host-side data types handed to a CRM plugin on each invocation.

The CRM host owns these values. A plugin reads them and never mutates them;
their lifetime is a single invocation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

# Key under which the host places the changed record, both in the input
# parameters and in the registered entity images.
TARGET = "Target"


@dataclass(frozen=True)
class EntityReference:
    """Lookup attribute value pointing at another record."""

    logical_name: str
    id: UUID
    name: str | None = None


@dataclass(frozen=True)
class OptionSetValue:
    """Choice attribute value."""

    value: int


@dataclass(frozen=True)
class Money:
    """Currency attribute value."""

    value: Decimal


@dataclass
class Entity:
    """A CRM record: its logical type name, primary key, and attribute bag."""

    logical_name: str
    id: UUID
    attributes: dict[str, Any] = field(default_factory=dict)

    def get_attribute_value(self, name: str) -> Any:
        """Return the attribute value, or None when the attribute is absent."""
        return self.attributes.get(name)


@dataclass(frozen=True)
class ExecutionContext:
    """The change event as the host describes it.

    Attributes:
        user_id: User the plugin step runs as.
        initiating_user_id: User whose action triggered the event.
        message_name: Operation name (Create, Update, Delete, ...).
        operation_created_on: When the host created the operation.
        input_parameters: Request parameters; "Target" holds the record for
            Create/Update messages.
        pre_entity_images: Registered snapshots of the record taken before
            the operation ran.
    """

    user_id: UUID
    initiating_user_id: UUID
    message_name: str
    operation_created_on: datetime
    input_parameters: Mapping[str, Any] = field(default_factory=dict)
    pre_entity_images: Mapping[str, Entity] = field(default_factory=dict)


@dataclass(frozen=True)
class ForwardedMessage:
    """Projection of a change event written to a sink.

    Built per invocation, serialized once, then discarded.
    """

    user_id: UUID
    message_name: str
    logical_name: str
    id: UUID
    attributes: Mapping[str, Any]
    operation_created_on: datetime
    user_full_name: str | None = None

    @classmethod
    def from_event(
        cls,
        context: ExecutionContext,
        entity: Entity,
        *,
        user_full_name: str | None = None,
    ) -> ForwardedMessage:
        return cls(
            user_id=context.user_id,
            message_name=context.message_name,
            logical_name=entity.logical_name,
            id=entity.id,
            attributes=dict(entity.attributes),
            operation_created_on=context.operation_created_on,
            user_full_name=user_full_name,
        )

    def to_payload(self, *, include_user_full_name: bool = False) -> dict[str, Any]:
        """Build the JSON object written to the sink.

        Key names and order are a deployed contract consumed downstream.
        The blob payload carries the resolved user name as "fullName"
        directly after "UserId"; the queue payload omits it.
        """
        payload: dict[str, Any] = {"UserId": self.user_id}
        if include_user_full_name:
            payload["fullName"] = self.user_full_name
        payload["MessageName"] = self.message_name
        payload["LogicalName"] = self.logical_name
        payload["Id"] = self.id
        payload["Attributes"] = dict(self.attributes)
        return payload
