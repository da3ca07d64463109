# src/crmforward/cli.py
"""crmforward Command Line Interface.

Local tooling around the CRM plugins: list the registered sinks and replay
a recorded change event through a sink, outside the CRM host.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import UUID

import typer
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crmforward import __version__
from crmforward.contracts import TARGET, Entity, ExecutionContext, PluginExecutionError
from crmforward.engine.crm_plugins import AzureBlobCrmPlugin, AzureQueueCrmPlugin, CrmPlugin, _get_plugin_manager
from crmforward.plugins.config_base import PluginConfigError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["app"]

app = typer.Typer(
    name="crmforward",
    help="crmforward: forward CRM change events to Azure storage.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"crmforward version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # Existence checked in _load_dotenv for a better message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """crmforward: forward CRM change events to Azure storage."""
    from crmforward.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


# Plugins subcommand group
plugins_app = typer.Typer(help="Plugin management commands.")
app.add_typer(plugins_app, name="plugins")


@dataclass(frozen=True)
class PluginInfo:
    """Metadata for a registered sink.

    Attributes:
        name: The sink identifier used by CRM plugins and --sink.
        description: Human-readable description of the sink.
    """

    name: str
    description: str


def _build_plugin_registry() -> list[PluginInfo]:
    """Build sink registry from discovered plugins."""
    from crmforward.plugins.discovery import get_plugin_description

    manager = _get_plugin_manager()
    return [PluginInfo(name=cls.name, description=get_plugin_description(cls)) for cls in manager.get_sinks()]


@plugins_app.command("list")
def plugins_list() -> None:
    """List available sinks."""
    plugins = _build_plugin_registry()

    typer.echo("\nSINKS:")
    if plugins:
        for plugin in plugins:
            typer.echo(f"  {plugin.name:20} - {plugin.description}")
    else:
        typer.echo("  (none available)")

    typer.echo()


# === Replay ===


class ReplayTarget(BaseModel):
    """Changed record in a replay file."""

    model_config = ConfigDict(extra="forbid")

    logical_name: str = Field(alias="LogicalName")
    id: UUID = Field(alias="Id")
    attributes: dict[str, Any] = Field(default_factory=dict, alias="Attributes")


class ReplayEvent(BaseModel):
    """A recorded change event.

    Example file:

        {
            "UserId": "0f8fad5b-d9cb-469f-a165-70867728950e",
            "MessageName": "Update",
            "OperationCreatedOn": "2024-03-01T08:15:30Z",
            "InitiatingUserFullName": "Jane Doe",
            "Target": {"LogicalName": "contact", "Id": "...", "Attributes": {"name": "Jane"}}
        }
    """

    model_config = ConfigDict(extra="forbid")

    user_id: UUID = Field(alias="UserId")
    initiating_user_id: UUID | None = Field(default=None, alias="InitiatingUserId")
    initiating_user_full_name: str | None = Field(default=None, alias="InitiatingUserFullName")
    message_name: str = Field(alias="MessageName")
    operation_created_on: datetime = Field(default_factory=lambda: datetime.now(tz=UTC), alias="OperationCreatedOn")
    target: ReplayTarget | None = Field(default=None, alias="Target")

    def to_execution_context(self) -> ExecutionContext:
        """Place the target both as pre-image and as input parameter."""
        images: dict[str, Entity] = {}
        parameters: dict[str, Any] = {}
        if self.target is not None:
            entity = Entity(
                logical_name=self.target.logical_name,
                id=self.target.id,
                attributes=dict(self.target.attributes),
            )
            images[TARGET] = entity
            parameters[TARGET] = entity

        return ExecutionContext(
            user_id=self.user_id,
            initiating_user_id=self.initiating_user_id or self.user_id,
            message_name=self.message_name,
            operation_created_on=self.operation_created_on,
            input_parameters=parameters,
            pre_entity_images=images,
        )


class ReplayOrganizationService:
    """Answers user lookups from the replay file instead of a CRM backend."""

    def __init__(self, user_id: UUID, full_name: str | None) -> None:
        self._user_id = user_id
        self._full_name = full_name

    def retrieve(self, entity_name: str, id: UUID, columns: Sequence[str]) -> Entity:
        attributes: dict[str, Any] = {}
        if entity_name == "systemuser" and id == self._user_id and self._full_name is not None:
            attributes["fullname"] = self._full_name
        return Entity(logical_name=entity_name, id=id, attributes=attributes)


def _plugin_for_sink(sink: str) -> type[CrmPlugin]:
    plugins: dict[str, type[CrmPlugin]] = {
        AzureBlobCrmPlugin.sink_name: AzureBlobCrmPlugin,
        AzureQueueCrmPlugin.sink_name: AzureQueueCrmPlugin,
    }
    if sink not in plugins:
        typer.echo(f"Error: Unknown sink '{sink}'. Valid sinks: {', '.join(sorted(plugins))}", err=True)
        raise typer.Exit(1)
    return plugins[sink]


@app.command()
def replay(
    event_file: Path = typer.Argument(
        ...,
        help="JSON file holding a recorded change event.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    sink: str = typer.Option(
        "azure_blob",
        "--sink",
        "-s",
        help="Sink to forward to (azure_blob, azure_queue).",
    ),
    secure_config: str | None = typer.Option(
        None,
        "--secure-config",
        envvar="CRMFORWARD_SECURE_CONFIG",
        help='Secure configuration JSON: {"AccountName": ..., "Key": ...}.',
        show_default=False,
    ),
    options: str | None = typer.Option(
        None,
        "--options",
        "-o",
        help="Unsecure configuration JSON with sink options.",
    ),
) -> None:
    """Forward a recorded change event through a CRM plugin, once."""
    from crmforward.plugins.context import LoggingTracingService, PluginServices

    plugin_cls = _plugin_for_sink(sink)

    try:
        event = ReplayEvent.model_validate_json(event_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        typer.echo(f"Invalid event file {event_file}:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"]) or "root"
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    try:
        plugin = plugin_cls(options, secure_config, plugin_manager=_get_plugin_manager())
    except PluginConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from None

    context = event.to_execution_context()
    services = PluginServices(
        execution_context=context,
        tracing_service=LoggingTracingService(),
        organization_service_factory=lambda _user_id: ReplayOrganizationService(
            context.initiating_user_id, event.initiating_user_full_name
        ),
    )

    try:
        descriptor = plugin.execute(services)
    except PluginExecutionError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except Exception as e:
        # Already traced with the full traceback by the forwarder
        typer.echo(f"Forwarding failed: {type(e).__name__}: {e}", err=True)
        raise typer.Exit(1) from None

    if descriptor is None:
        typer.echo("No target record in event; nothing forwarded.")
        return

    typer.echo(f"Forwarded to {descriptor.uri} ({descriptor.size_bytes} bytes)")