"""
sierra_authz.engine

Authorization decision engine.

Responsibilities:
- Define the request/decision data model (Principal, Resource, Schema, Decision).
- Validate proposed document data against a collection schema.
- Resolve ownership/org scope and evaluate the per-operation rule table.
"""

from sierra_authz.engine.models import (
    CollectionSchema,
    Decision,
    DenyReason,
    FieldType,
    Operation,
    Principal,
    Resource,
    Role,
    ValidationResult,
)
from sierra_authz.engine.policy import decide
from sierra_authz.engine.scope import Scope, resolve_scope
from sierra_authz.engine.validator import validate

__all__ = [
    "CollectionSchema",
    "Decision",
    "DenyReason",
    "FieldType",
    "Operation",
    "Principal",
    "Resource",
    "Role",
    "Scope",
    "ValidationResult",
    "decide",
    "resolve_scope",
    "validate",
]


# --- Module Notes -----------------------------------------------------------
# Nothing in this package performs I/O or logging; the service layer owns both.
