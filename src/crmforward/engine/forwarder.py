# src/crmforward/engine/forwarder.py
"""EventForwarder: capture one change event and write it to one sink.

The pipeline is the same for every sink:

    locate target -> (resolve user name) -> ensure sink -> build destination
    -> serialize -> write

Sinks differ only through their capabilities (SinkProtocol): whether they
need the user's display name, how they name the destination, and what
metadata they attach.

Error handling (the only two failure kinds the CRM host distinguishes):
    - OrganizationServiceFault -> PluginExecutionError with a fixed message
    - anything else -> traced to the host with the full traceback, re-raised

Nothing is retried and nothing written earlier in the invocation is rolled
back (a container created just before a failed upload stays).
"""

from __future__ import annotations

import traceback
from typing import TYPE_CHECKING, Literal

from crmforward.contracts import TARGET, Entity, ForwardedMessage, OrganizationServiceFault, PluginExecutionError
from crmforward.core.logging import get_logger
from crmforward.core.serialization import serialize_payload

if TYPE_CHECKING:
    from crmforward.contracts import ExecutionContext, SinkWriteDescriptor
    from crmforward.plugins.context import PluginServices
    from crmforward.plugins.protocols import SinkProtocol

logger = get_logger(__name__)

# Where the changed record is read from:
# - pre_image: snapshot registered on the step (survives Delete messages)
# - input_parameters: the request's Target (Create/Update messages)
TargetSource = Literal["pre_image", "input_parameters"]

USER_ENTITY = "systemuser"
USER_FULL_NAME_COLUMN = "fullname"


class EventForwarder:
    """Forward a change event to a single sink.

    Example:
        forwarder = EventForwarder(sink, label="Sandboxable Sample Azure Blob CRM Plugin", target_source="pre_image")
        forwarder.forward(services)
    """

    def __init__(self, sink: SinkProtocol, *, label: str, target_source: TargetSource) -> None:
        self._sink = sink
        self._label = label
        self._target_source = target_source

    @property
    def label(self) -> str:
        return self._label

    def locate_target(self, context: ExecutionContext) -> Entity | None:
        """Return the changed record, or None if this invocation carries none."""
        if self._target_source == "pre_image":
            return context.pre_entity_images.get(TARGET)

        target = context.input_parameters.get(TARGET)
        # Target can also be an EntityReference (e.g. Delete requests)
        if isinstance(target, Entity):
            return target
        return None

    def forward(self, services: PluginServices) -> SinkWriteDescriptor | None:
        """Write the change event to the sink.

        Returns:
            Descriptor of the write, or None when there was no target record
            (nothing is written and no network call is made).

        Raises:
            PluginExecutionError: The CRM backend faulted during a lookup.
            Exception: Any other failure, unchanged, after being traced.
        """
        context = services.execution_context
        entity = self.locate_target(context)
        if entity is None:
            logger.debug(
                "No target record in execution context",
                plugin=self._label,
                target_source=self._target_source,
                message_name=context.message_name,
            )
            return None

        log = logger.bind(
            plugin=self._label,
            sink=self._sink.name,
            message_name=context.message_name,
            logical_name=entity.logical_name,
            record_id=str(entity.id),
        )

        try:
            user_full_name = self._resolve_user_full_name(services) if self._sink.requires_user_full_name else None
            message = ForwardedMessage.from_event(context, entity, user_full_name=user_full_name)

            self._sink.ensure_ready()
            destination = self._sink.destination_for(message)
            metadata = self._sink.metadata_for(message)

            body = serialize_payload(
                message.to_payload(include_user_full_name=self._sink.requires_user_full_name),
                indent=self._sink.json_indent,
            )
            descriptor = self._sink.write(destination, body, metadata)
        except OrganizationServiceFault as fault:
            log.warning("CRM backend fault during forwarding", error=str(fault))
            raise PluginExecutionError(f"An error occurred in {self._label}") from fault
        except Exception as exc:
            services.tracing_service.trace("%s: %s", self._label, "".join(traceback.format_exception(exc)))
            log.error("Forwarding failed", error_type=type(exc).__name__, error=str(exc))
            raise

        log.info("Forwarded change event", uri=descriptor.uri)
        return descriptor

    def _resolve_user_full_name(self, services: PluginServices) -> str | None:
        """Look up the initiating user's display name in the CRM backend."""
        context = services.execution_context
        organization_service = services.create_organization_service(context.user_id)
        user = organization_service.retrieve(USER_ENTITY, context.initiating_user_id, [USER_FULL_NAME_COLUMN])
        full_name = user.get_attribute_value(USER_FULL_NAME_COLUMN)
        return full_name if isinstance(full_name, str) else None
