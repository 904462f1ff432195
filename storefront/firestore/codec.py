"""
Firestore Value Codec

Converts between Python values and the typed JSON values used by the
Firestore REST API (stringValue, integerValue, mapValue, ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from ..common.value_utils import parse_timestamp


class _ServerTimestamp:
    """Placeholder for a field the server fills with its commit time."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def format_timestamp(value: datetime) -> str:
    """RFC 3339 UTC timestamp with microseconds, naive values taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')


def encode_value(value: Any) -> Dict[str, Any]:
    """
    Encode a Python value as a Firestore Value.

    Raises:
        TypeError: For unsupported types or a nested SERVER_TIMESTAMP
    """
    if value is SERVER_TIMESTAMP:
        raise TypeError("SERVER_TIMESTAMP is only allowed as a top-level field value")
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in value.items()}}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def decode_value(value: Dict[str, Any]) -> Any:
    """Decode a Firestore Value into a Python value."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return parse_timestamp(value["timestampValue"])
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    if "referenceValue" in value:
        return value["referenceValue"]
    if "bytesValue" in value:
        return value["bytesValue"]
    if "geoPointValue" in value:
        return dict(value["geoPointValue"])
    return None


def encode_fields(data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Encode a document's fields.

    Returns:
        (encoded fields, field paths to set to the server time)
    """
    fields = {}
    server_time_paths = []
    for key, value in data.items():
        if value is SERVER_TIMESTAMP:
            server_time_paths.append(key)
        else:
            fields[key] = encode_value(value)
    return fields, server_time_paths


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Decode a Firestore fields map into a plain dict."""
    return {key: decode_value(value) for key, value in fields.items()}
