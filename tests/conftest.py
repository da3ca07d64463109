# tests/conftest.py
"""Shared test fixtures.

The CRM host and the Azure SDK are external. Tests stand them in with:

- RecordingTracingService: collects trace lines instead of sending them to
  the host
- FakeOrganizationService: answers systemuser lookups from a dict, or
  raises a configured fault
- MagicMock Azure clients patched in at the sink's _get_*_client seam

Hypothesis profiles:
- "ci" profile: 100 examples (default)
- "debug" profile: 10 examples, verbose

Set profile via environment variable:
    HYPOTHESIS_PROFILE=debug pytest tests/
"""

import logging
import os
from collections.abc import Callable, Generator, Sequence
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import pytest
import structlog
from hypothesis import Verbosity, settings
from structlog.stdlib import ProcessorFormatter

from crmforward.contracts import TARGET, Entity, ExecutionContext
from crmforward.plugins.context import PluginServices

settings.register_profile("ci", max_examples=100)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))

USER_ID = UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
INITIATING_USER_ID = UUID("7c9e6679-7425-40de-944b-e07fc1f90ae7")
RECORD_ID = UUID("3fa85f64-5717-4562-b3fc-2c963f66afa6")
OPERATION_CREATED_ON = datetime(2024, 3, 1, 8, 15, 30, 123456, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by CLI and logging tests."""
    root = logging.getLogger()
    level = root.level
    yield
    root.handlers = [h for h in root.handlers if not isinstance(h.formatter, ProcessorFormatter)]
    root.setLevel(level)
    structlog.reset_defaults()


class RecordingTracingService:
    """Tracing service that keeps formatted trace lines."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def trace(self, message: str, *args: Any) -> None:
        self.lines.append(message % args if args else message)


class FakeOrganizationService:
    """Organization service backed by a dict of user full names."""

    def __init__(self, full_names: dict[UUID, str], fault: Exception | None = None) -> None:
        self._full_names = full_names
        self._fault = fault
        self.calls: list[tuple[str, UUID, list[str]]] = []

    def retrieve(self, entity_name: str, id: UUID, columns: Sequence[str]) -> Entity:
        self.calls.append((entity_name, id, list(columns)))
        if self._fault is not None:
            raise self._fault
        attributes: dict[str, Any] = {}
        if id in self._full_names:
            attributes["fullname"] = self._full_names[id]
        return Entity(logical_name=entity_name, id=id, attributes=attributes)


@pytest.fixture
def tracing_service() -> RecordingTracingService:
    return RecordingTracingService()


@pytest.fixture
def organization_service() -> FakeOrganizationService:
    return FakeOrganizationService({INITIATING_USER_ID: "Jane Doe"})


@pytest.fixture
def contact() -> Entity:
    """The example record: a contact named Jane."""
    return Entity(logical_name="contact", id=RECORD_ID, attributes={"name": "Jane"})


def build_context(
    *,
    pre_image: Entity | None = None,
    target: Any = None,
    message_name: str = "Update",
) -> ExecutionContext:
    return ExecutionContext(
        user_id=USER_ID,
        initiating_user_id=INITIATING_USER_ID,
        message_name=message_name,
        operation_created_on=OPERATION_CREATED_ON,
        input_parameters={TARGET: target} if target is not None else {},
        pre_entity_images={TARGET: pre_image} if pre_image is not None else {},
    )


@pytest.fixture
def make_services(
    tracing_service: RecordingTracingService,
    organization_service: FakeOrganizationService,
) -> Callable[..., PluginServices]:
    """Build PluginServices around the recording tracer and fake backend.

    organization_service= swaps the backend; other keyword arguments go to
    the ExecutionContext builder: pre_image=, target=, message_name=.
    """

    def _make(*, organization_service: Any = organization_service, **context_kwargs: Any) -> PluginServices:
        return PluginServices(
            execution_context=build_context(**context_kwargs),
            tracing_service=tracing_service,
            organization_service_factory=lambda _user_id: organization_service,
        )

    return _make
