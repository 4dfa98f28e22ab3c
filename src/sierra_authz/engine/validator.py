"""
sierra_authz.engine.validator

Schema validation for proposed document writes.

Responsibilities:
- Check required-field presence (absent vs explicit null are distinct failures).
- Check declared field types.
- Reject changes to immutable fields and client-forged server-controlled fields.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sierra_authz.engine.models import (
    CollectionSchema,
    DenyReason,
    FieldType,
    Operation,
    ValidationResult,
)


def _matches_type(value: Any, expected: FieldType) -> bool:
    # bool is an int subclass; it must never satisfy `number`.
    if expected is FieldType.string:
        return isinstance(value, str)
    if expected is FieldType.number:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected is FieldType.timestamp:
        return isinstance(value, datetime)
    if expected is FieldType.boolean:
        return isinstance(value, bool)
    if expected is FieldType.map:
        return isinstance(value, Mapping)
    if expected is FieldType.array:
        return isinstance(value, (list, tuple))
    return False


def _same_value(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return left == right


def validate(
    schema: CollectionSchema,
    data: Mapping[str, Any] | None,
    operation: Operation,
    *,
    existing: Mapping[str, Any] | None = None,
    request_time: datetime | None = None,
    allow_immutable_changes: bool = False,
) -> ValidationResult:
    """
    Validate `data` (full document on create, delta on update) against `schema`.

    The first failing check, in the order missing, null, type, immutable, server
    field, determines `reason`; `missing_fields` and `type_errors` list every
    offending field regardless.
    """

    proposed: Mapping[str, Any] = data or {}

    missing: set[str] = set()
    nulled: set[str] = set()
    for name in schema.required_fields:
        if name not in proposed:
            # Updates carry a delta; untouched required fields stay as stored.
            if operation is Operation.create:
                missing.add(name)
        elif proposed[name] is None:
            nulled.add(name)

    type_errors = {
        name
        for name, value in proposed.items()
        if value is not None
        and name in schema.field_types
        and not _matches_type(value, schema.field_types[name])
    }

    immutable_changed = False
    if operation is Operation.update and not allow_immutable_changes:
        before: Mapping[str, Any] = existing or {}
        immutable_changed = any(
            name in proposed and (name not in before or not _same_value(proposed[name], before[name]))
            for name in schema.immutable_fields
        )

    forged = any(
        name in proposed and (request_time is None or proposed[name] != request_time)
        for name in schema.server_controlled_fields
    )

    reason: DenyReason | None = None
    if missing:
        reason = DenyReason.required_field_missing
    elif nulled:
        reason = DenyReason.required_field_null
    elif type_errors:
        reason = DenyReason.type_mismatch
    elif immutable_changed:
        reason = DenyReason.immutable_field_modified
    elif forged:
        reason = DenyReason.server_field_forged

    if reason is None:
        return ValidationResult.passed()
    return ValidationResult(
        ok=False,
        missing_fields=frozenset(missing | nulled),
        type_errors=frozenset(type_errors),
        reason=reason,
    )
