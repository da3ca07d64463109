"""Dynamic sink discovery by package scanning.

Scans sink packages for classes that:
1. Inherit from BaseSink
2. Have a `name` class attribute
3. Are not abstract
"""

import importlib
import inspect
import logging
import pkgutil
from typing import Any

logger = logging.getLogger(__name__)

# Modules that should never be scanned for plugins
EXCLUDED_MODULES: frozenset[str] = frozenset(
    {
        "auth",
    }
)

# Packages to scan for sinks (non-recursive)
SINK_PACKAGES: tuple[str, ...] = ("crmforward.plugins.azure",)


def discover_sinks_in_package(package_name: str, base_class: type) -> list[type]:
    """Discover plugin classes in a package.

    Imports each module of the package (non-recursive) and collects classes
    defined there that inherit from base_class and have a `name` attribute.

    Modules are imported by their regular dotted name, so discovered classes
    are the same objects tests and callers import directly.
    """
    package = importlib.import_module(package_name)
    discovered: list[type] = []

    for module_info in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if module_info.ispkg or module_info.name in EXCLUDED_MODULES:
            continue

        # Plugin code is system-owned. Import errors are bugs - let them propagate.
        module = importlib.import_module(f"{package_name}.{module_info.name}")
        discovered.extend(_discover_in_module(module, base_class))

    return discovered


def _discover_in_module(module: Any, base_class: type) -> list[type]:
    discovered: list[type] = []
    for name, obj in inspect.getmembers(module, inspect.isclass):
        # Must be defined in this module (not imported)
        if obj.__module__ != module.__name__:
            continue

        if not issubclass(obj, base_class) or obj is base_class:
            continue

        if inspect.isabstract(obj):
            continue

        plugin_name = getattr(obj, "name", None)
        if not plugin_name:
            logger.warning(
                "Class %s in %s inherits from %s but has no/empty 'name' attribute - skipping",
                name,
                module.__name__,
                base_class.__name__,
            )
            continue

        discovered.append(obj)

    return discovered


def discover_all_sinks() -> list[type]:
    """Discover all built-in sinks.

    Raises:
        ValueError: If two sinks share a name.
    """
    from crmforward.plugins.base import BaseSink

    all_discovered: list[type] = []
    seen: dict[str, type] = {}

    for package_name in SINK_PACKAGES:
        for cls in discover_sinks_in_package(package_name, BaseSink):
            cls_name: str = cls.name  # type: ignore[attr-defined]
            if cls_name in seen:
                raise ValueError(
                    f"Duplicate sink plugin name '{cls_name}': "
                    f"found in both {seen[cls_name].__module__} and {cls.__module__}. "
                    f"Plugin names must be unique."
                )
            seen[cls_name] = cls
            all_discovered.append(cls)

    return all_discovered


def get_plugin_description(plugin_cls: type) -> str:
    """Extract description from plugin class docstring.

    Returns the first non-empty line of the docstring, or a name-based
    fallback when there is no docstring.
    """
    if plugin_cls.__doc__:
        for line in plugin_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned

    name = getattr(plugin_cls, "name", plugin_cls.__name__)
    return f"{name} plugin"


def create_dynamic_hookimpl(plugin_classes: list[type], hook_method_name: str) -> object:
    """Create a pluggy hookimpl object returning the given plugin classes."""
    from crmforward.plugins.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

        pass

    def hook_method(self: Any) -> list[type]:
        return plugin_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
