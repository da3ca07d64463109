# src/crmforward/core/serialization.py
"""
JSON serialization of forwarded messages.

Two-phase approach:
1. Normalize: convert CRM value types (GUIDs, lookups, money, timestamps)
   to JSON-safe primitives (our code)
2. Serialize: json.dumps with a fixed indent

The output shape follows what downstream consumers of the storage payloads
already read: GUIDs as hyphenated lower-case strings, timestamps in the .NET
round-trip ("O") format, lookups as {Id, LogicalName, Name} objects, and
choice/currency values as {Value} objects. Decimals keep every digit: they are
written as their exact string form.

NaN and Infinity are rejected, not silently converted.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

from crmforward.contracts.events import EntityReference, Money, OptionSetValue


def format_round_trip(value: datetime) -> str:
    """Format a datetime like .NET's round-trip ("O") specifier.

    Seven fractional digits, then "Z" for a zero offset, an explicit offset for other
    aware values, and nothing for naive values:

        2024-03-01T08:15:30.1234560Z
        2024-03-01T08:15:30.1234560+02:00
        2024-03-01T08:15:30.1234560
    """
    base = f"{value.year:04d}-{value:%m-%dT%H:%M:%S}.{value.microsecond:06d}0"
    offset = value.utcoffset()
    if offset is None:
        return base
    if offset == timedelta(0):
        return f"{base}Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{base}{sign}{hours:02d}:{minutes:02d}"


def format_braced_guid(value: UUID) -> str:
    """Braced lower-case GUID: {3fa85f64-5717-4562-b3fc-2c963f66afa6}."""
    return "{" + str(value).lower() + "}"


def format_compact_guid(value: UUID) -> str:
    """32 upper-case hex digits without hyphens: 3FA85F6457174562B3FC2C963F66AFA6."""
    return value.hex.upper()


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive.

    Raises:
        ValueError: If the value is a non-finite float or Decimal.
        TypeError: If the value has no JSON representation.
    """
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot serialize non-finite float: {obj}")
        return obj

    if obj is None or isinstance(obj, str | int | bool):
        return obj

    if isinstance(obj, UUID):
        return str(obj)

    if isinstance(obj, datetime):
        return format_round_trip(obj)

    if isinstance(obj, date):
        return obj.isoformat()

    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Cannot serialize non-finite Decimal: {obj}")
        return str(obj)

    if isinstance(obj, EntityReference):
        return {"Id": str(obj.id), "LogicalName": obj.logical_name, "Name": obj.name}

    if isinstance(obj, OptionSetValue):
        return {"Value": obj.value}

    if isinstance(obj, Money):
        return {"Value": _normalize_value(obj.value)}

    if isinstance(obj, Mapping):
        return {str(k): _normalize_value(v) for k, v in obj.items()}

    if isinstance(obj, list | tuple):
        return [_normalize_value(v) for v in obj]

    raise TypeError(f"Cannot serialize value of type {type(obj).__name__}")


def serialize_payload(payload: Mapping[str, Any], *, indent: int | None = 2) -> str:
    """Serialize a forwarded-message payload to JSON text.

    Args:
        payload: Payload built by ForwardedMessage.to_payload().
        indent: Indentation width; None for compact output.

    Returns:
        JSON text. Non-ASCII characters are kept as-is.
    """
    return json.dumps(_normalize_value(payload), indent=indent, ensure_ascii=False)
