"""
sierra_authz.codec.firestore_values

Firestore REST typed-value codec.

Responsibilities:
- Decode `{"fields": {...}}` style document payloads into plain Python values.
- Encode plain Python values back into typed values (fixtures, seeding, audit output).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any


class ValueDecodeError(ValueError):
    pass


# Firestore caps map/array nesting at 20 levels; anything deeper is not a real document.
MAX_DEPTH = 20

_INT64_STR = re.compile(r"[+-]?[0-9]+")


def _parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise ValueDecodeError("timestampValue must be an RFC 3339 string")
    try:
        # fromisoformat accepts a trailing "Z" on current interpreters.
        ts = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValueDecodeError(f"invalid timestampValue: {raw!r}") from e
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts


def decode_value(value: Mapping[str, Any], *, _depth: int = 0) -> Any:
    if _depth > MAX_DEPTH:
        raise ValueDecodeError(f"value nesting exceeds {MAX_DEPTH} levels")
    if not isinstance(value, Mapping) or len(value) != 1:
        raise ValueDecodeError("typed value must be an object with exactly one key")

    ((kind, raw),) = value.items()
    if kind == "nullValue":
        return None
    if kind == "stringValue":
        if not isinstance(raw, str):
            raise ValueDecodeError("stringValue must be a string")
        return raw
    if kind == "booleanValue":
        if not isinstance(raw, bool):
            raise ValueDecodeError("booleanValue must be a boolean")
        return raw
    if kind == "integerValue":
        # The REST API sends int64 values as strings.
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and _INT64_STR.fullmatch(raw):
            return int(raw)
        raise ValueDecodeError(f"invalid integerValue: {raw!r}")
    if kind == "doubleValue":
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise ValueDecodeError("doubleValue must be a number")
        try:
            return float(raw)
        except ValueError as e:
            raise ValueDecodeError(f"invalid doubleValue: {raw!r}") from e
    if kind == "timestampValue":
        return _parse_timestamp(raw)
    if kind == "mapValue":
        if not isinstance(raw, Mapping):
            raise ValueDecodeError("mapValue must be an object")
        return decode_fields(raw.get("fields") or {}, _depth=_depth + 1)
    if kind == "arrayValue":
        if not isinstance(raw, Mapping):
            raise ValueDecodeError("arrayValue must be an object")
        return [decode_value(v, _depth=_depth + 1) for v in raw.get("values") or []]
    raise ValueDecodeError(f"unsupported value type: {kind}")


def decode_fields(fields: Mapping[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    if not isinstance(fields, Mapping):
        raise ValueDecodeError("fields must be an object")
    return {str(name): decode_value(v, _depth=_depth) for name, v in fields.items()}


def encode_value(value: Any) -> dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        ts = value if value.tzinfo else value.replace(tzinfo=UTC)
        return {"timestampValue": ts.astimezone(UTC).isoformat().replace("+00:00", "Z")}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"cannot encode value of type {type(value).__name__}")


def encode_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    return {str(name): encode_value(v) for name, v in data.items()}


# --- Module Notes -----------------------------------------------------------
# Only the value kinds the collection schemas can declare are supported;
# geoPoint/reference/bytes values are rejected as unsupported.
