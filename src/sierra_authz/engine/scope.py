"""
sierra_authz.engine.scope

Ownership and organization scope extraction.

Responsibilities:
- Derive `isOwner`, `sameOrg` and `isAdmin` from a principal and a resource snapshot.
- Perform attribute extraction only; combining the flags is the policy's job.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sierra_authz.engine.models import CollectionSchema, Operation, Principal, Resource


@dataclass(frozen=True, slots=True)
class Scope:
    is_owner: bool
    same_org: bool
    is_admin: bool


def _attr(data: Mapping[str, Any] | None, name: str) -> Any:
    if not data:
        return None
    return data.get(name)


def _matches(value: Any, expected: str) -> bool:
    # An absent attribute or an empty identity never grants scope.
    return isinstance(value, str) and bool(expected) and value == expected


def resolve_scope(
    principal: Principal,
    resource: Resource,
    operation: Operation,
    schema: CollectionSchema | None = None,
) -> Scope:
    schema = schema or CollectionSchema()

    if operation is Operation.create:
        owner = _attr(resource.proposed_data, schema.owner_field)
        org = _attr(resource.proposed_data, schema.org_field)
    else:
        owner = _attr(resource.existing_data, schema.owner_field)
        org = _attr(resource.existing_data, schema.org_field)

    return Scope(
        is_owner=_matches(owner, principal.subject_id),
        same_org=_matches(org, principal.company_id),
        is_admin=principal.is_admin,
    )


# --- Module Notes -----------------------------------------------------------
# For list queries the caller passes the query's equality constraints as
# `existing_data`, so `sameOrg` reflects whether the query is org-scoped.
