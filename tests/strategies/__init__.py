# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import entities, record_ids, STANDARD_SETTINGS
"""

from tests.strategies.crm import (
    attribute_values,
    attributes,
    entities,
    logical_names,
    mixed_case_logical_names,
    record_ids,
)
from tests.strategies.settings import DETERMINISM_SETTINGS, QUICK_SETTINGS, STANDARD_SETTINGS

__all__ = [
    "DETERMINISM_SETTINGS",
    "QUICK_SETTINGS",
    "STANDARD_SETTINGS",
    "attribute_values",
    "attributes",
    "entities",
    "logical_names",
    "mixed_case_logical_names",
    "record_ids",
]
