"""
tests.test_scope

Ownership/org attribute extraction.
"""

from __future__ import annotations

from sierra_authz.engine import CollectionSchema, Operation, Principal, Resource, Role, resolve_scope

WORKER = Principal(subject_id="u1", role=Role.worker, company_id="c1")


def test_create_uses_proposed_data() -> None:
    resource = Resource(
        collection="jobs",
        document_id="j1",
        existing_data={"ownerId": "someone", "orgId": "elsewhere"},
        proposed_data={"ownerId": "u1", "orgId": "c1"},
    )
    scope = resolve_scope(WORKER, resource, Operation.create)
    assert scope.is_owner and scope.same_org and not scope.is_admin


def test_other_operations_use_existing_data() -> None:
    resource = Resource(
        collection="jobs",
        document_id="j1",
        existing_data={"ownerId": "u2", "orgId": "c1"},
        proposed_data={"ownerId": "u1", "orgId": "c1"},
    )
    scope = resolve_scope(WORKER, resource, Operation.update)
    assert not scope.is_owner
    assert scope.same_org


def test_schema_field_names_are_respected() -> None:
    schema = CollectionSchema(owner_field="userId", org_field="companyId")
    resource = Resource(
        collection="timeEntries",
        document_id="t1",
        existing_data={"userId": "u1", "companyId": "c1", "ownerId": "x", "orgId": "y"},
    )
    scope = resolve_scope(WORKER, resource, Operation.read, schema)
    assert scope.is_owner and scope.same_org


def test_missing_attributes_never_match_empty_identity() -> None:
    nobody = Principal(subject_id="", role=Role.admin, company_id="")
    resource = Resource(collection="jobs", document_id="j1", existing_data={"ownerId": "", "orgId": ""})
    scope = resolve_scope(nobody, resource, Operation.read)
    assert not scope.is_owner
    assert not scope.same_org
    assert scope.is_admin


def test_absent_snapshot_grants_nothing() -> None:
    resource = Resource(collection="jobs", document_id="j1")
    scope = resolve_scope(WORKER, resource, Operation.delete)
    assert not scope.is_owner and not scope.same_org
