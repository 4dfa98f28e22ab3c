"""
sierra_authz.engine.policy

Policy evaluator (core decision logic).

Responsibilities:
- Evaluate a request in strict order: authentication, schema validation, rule table.
- Return a `Decision` for every input; nothing here raises for a denied request.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sierra_authz.engine.models import (
    CollectionSchema,
    Decision,
    DenyReason,
    Operation,
    Principal,
    Resource,
    ValidationResult,
)
from sierra_authz.engine.scope import Scope, resolve_scope
from sierra_authz.engine.validator import validate


@dataclass(frozen=True, slots=True)
class PolicyRule:
    operation: Operation
    name: str
    condition: Callable[[Scope], bool]


# Evaluated top to bottom; the first rule for the operation decides.
RULES: tuple[PolicyRule, ...] = (
    PolicyRule(Operation.create, "owner in org", lambda s: s.is_owner and s.same_org),
    PolicyRule(Operation.read, "owner, org member or admin", lambda s: s.is_owner or s.same_org or s.is_admin),
    PolicyRule(Operation.update, "owner in org or admin", lambda s: (s.is_owner and s.same_org) or s.is_admin),
    PolicyRule(Operation.delete, "owner or admin", lambda s: s.is_owner or s.is_admin),
    PolicyRule(Operation.list, "org member or admin", lambda s: s.same_org or s.is_admin),
)

_VALIDATED_OPERATIONS = frozenset({Operation.create, Operation.update})


def _deny(reason: DenyReason, validation: ValidationResult | None = None) -> Decision:
    return Decision(allowed=False, reason=reason.value, validation=validation)


def decide(
    principal: Principal,
    operation: Operation,
    resource: Resource,
    schema: CollectionSchema | None,
) -> Decision:
    """
    Decide whether `principal` may perform `operation` on `resource`.

    A missing schema means the collection is not mapped for client access and
    is denied by default. Admins may rewrite immutable fields on update; every
    other validation check applies to them as well.
    """

    if not principal.authenticated:
        return _deny(DenyReason.unauthenticated)

    if schema is None:
        return _deny(DenyReason.default_deny)

    validation: ValidationResult | None = None
    if operation in _VALIDATED_OPERATIONS:
        validation = validate(
            schema,
            resource.proposed_data,
            operation,
            existing=resource.existing_data,
            request_time=resource.request_time,
            allow_immutable_changes=principal.is_admin,
        )
        if not validation.ok:
            return _deny(validation.reason or DenyReason.default_deny, validation)

    scope = resolve_scope(principal, resource, operation, schema)
    for rule in RULES:
        if rule.operation is not operation:
            continue
        if rule.condition(scope):
            return Decision(allowed=True, reason=f"{operation.value}: {rule.name}", validation=validation)
        return _deny(DenyReason.scope_denied, validation)

    return _deny(DenyReason.default_deny, validation)


# --- Module Notes -----------------------------------------------------------
# Conditions are non-overlapping once the unauthenticated and validation branches
# have short-circuited, so rule order only affects reason precision.
