# src/crmforward/plugins/hookspecs.py
"""pluggy hook specifications for crmforward sinks.

Sink packs implement these hooks to register themselves with the framework.
The plugin manager calls these hooks during discovery.

Usage (implementing a plugin):
    from crmforward.plugins.hookspecs import hookimpl

    class MySinkPack:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def crmforward_get_sinks(self):
            return [MySink]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from crmforward.plugins.protocols import SinkProtocol

# Project name for pluggy
PROJECT_NAME = "crmforward"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CrmForwardSinkSpec:
    """Hook specifications for sink plugins."""

    @hookspec
    def crmforward_get_sinks(self) -> list[type["SinkProtocol"]]:  # type: ignore[empty-body]
        """Return sink plugin classes.

        Returns:
            List of Sink plugin classes (not instances)
        """
