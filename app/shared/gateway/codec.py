"""Firestore REST typed-value codec.

The emulator's REST API wraps every value in a single-key object naming its
type (``{"stringValue": "x"}``, ``{"integerValue": "42"}``, ...). Integers
travel as strings; timestamps as RFC 3339 in UTC.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal
from typing import Any


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _parse_timestamp(raw: str) -> datetime:
    # Firestore may emit nanosecond fractions; datetime keeps microseconds
    text = raw.rstrip("Z")
    if "." in text:
        head, fraction = text.split(".", 1)
        text = f"{head}.{fraction[:6].ljust(6, '0')}"
    return datetime.fromisoformat(text).replace(tzinfo=UTC)


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a Python value as a Firestore typed value.

    Raises:
        TypeError: If the value has no Firestore representation.
    """
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float | Decimal):
        return {"doubleValue": float(value)}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": _format_timestamp(value)}
    if isinstance(value, date):
        return {"timestampValue": _format_timestamp(datetime.combine(value, time.min))}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, list | tuple):
        return {"arrayValue": {"values": [encode_value(item) for item in value]}}
    raise TypeError(f"Cannot encode value of type {type(value).__name__} for Firestore")


def decode_value(typed: Mapping[str, Any]) -> Any:
    """Decode a Firestore typed value into a Python value.

    Raises:
        ValueError: If the typed value uses an unsupported type key.
    """
    if "nullValue" in typed:
        return None
    if "booleanValue" in typed:
        return bool(typed["booleanValue"])
    if "integerValue" in typed:
        return int(typed["integerValue"])
    if "doubleValue" in typed:
        return float(typed["doubleValue"])
    if "stringValue" in typed:
        return typed["stringValue"]
    if "timestampValue" in typed:
        return _parse_timestamp(typed["timestampValue"])
    if "mapValue" in typed:
        return decode_fields(typed["mapValue"].get("fields", {}))
    if "arrayValue" in typed:
        return [decode_value(item) for item in typed["arrayValue"].get("values", [])]
    if "referenceValue" in typed:
        return typed["referenceValue"]
    raise ValueError(f"Unsupported Firestore value: {sorted(typed)}")


def encode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a field mapping for a document body."""
    return {str(key): encode_value(value) for key, value in fields.items()}


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Decode a document's ``fields`` object."""
    return {key: decode_value(value) for key, value in fields.items()}
