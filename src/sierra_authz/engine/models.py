"""
sierra_authz.engine.models

Data model for authorization decisions.

Responsibilities:
- Define the authenticated actor (`Principal`) and the targeted document (`Resource`).
- Define per-collection schema declarations (`CollectionSchema`).
- Define decision and validation outcomes, including the deny reason taxonomy.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class Role(enum.StrEnum):
    worker = "worker"
    admin = "admin"


class Operation(enum.StrEnum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    list = "list"


class FieldType(enum.StrEnum):
    string = "string"
    number = "number"
    timestamp = "timestamp"
    boolean = "boolean"
    map = "map"
    array = "array"


class DenyReason(enum.StrEnum):
    # Values are audit/telemetry reason codes; treat as a stable contract.
    unauthenticated = "unauthenticated"
    required_field_missing = "required field missing"
    required_field_null = "required field null"
    type_mismatch = "type mismatch"
    immutable_field_modified = "immutable field modified"
    server_field_forged = "server field forged"
    scope_denied = "scope denied"
    default_deny = "default deny"


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Actor making a request, derived from a verified token.
    """

    subject_id: str
    role: Role = Role.worker
    company_id: str = ""
    authenticated: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    @classmethod
    def anonymous(cls) -> Principal:
        return cls(subject_id="", role=Role.worker, company_id="", authenticated=False)


@dataclass(frozen=True, slots=True)
class Resource:
    """
    Target document snapshot supplied by the caller.

    `existing_data` is None on create; `proposed_data` is None on read/delete/list.
    For updates `proposed_data` is the delta being written. For list queries
    `existing_data` carries the query's equality constraints.
    """

    collection: str
    document_id: str
    existing_data: Mapping[str, Any] | None = None
    proposed_data: Mapping[str, Any] | None = None
    # Trusted request-time clock; server-controlled fields must equal it.
    request_time: datetime | None = None


@dataclass(frozen=True, slots=True)
class CollectionSchema:
    required_fields: frozenset[str] = frozenset()
    field_types: Mapping[str, FieldType] = field(default_factory=dict)
    server_controlled_fields: frozenset[str] = frozenset()
    immutable_fields: frozenset[str] = frozenset()
    owner_field: str = "ownerId"
    org_field: str = "orgId"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    ok: bool
    missing_fields: frozenset[str] = frozenset()
    type_errors: frozenset[str] = frozenset()
    reason: DenyReason | None = None

    @classmethod
    def passed(cls) -> ValidationResult:
        return cls(ok=True)


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: str
    validation: ValidationResult | None = None

    @property
    def deny_reason(self) -> DenyReason | None:
        if self.allowed:
            return None
        return DenyReason(self.reason)


# --- Module Notes -----------------------------------------------------------
# Reason codes are never shown to end users; callers surface a generic
# "permission denied" regardless of which DenyReason was produced.
