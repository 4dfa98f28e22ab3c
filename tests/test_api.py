"""
tests.test_api

HTTP surface: health probes, decision endpoints, audit trail and dev token minting.
"""

from __future__ import annotations

import httpx
import pytest

from sierra_authz.api.app import create_app
from sierra_authz.settings import Settings

JOB_FIELDS = {
    "ownerId": {"stringValue": "u1"},
    "orgId": {"stringValue": "c1"},
    "status": {"stringValue": "pending"},
    "title": {"stringValue": "Paint House"},
}


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/readyz")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ready"
    assert "jobs" in body["collections"]


@pytest.mark.asyncio
async def test_owner_can_create_job_in_own_org(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={"operation": "create", "collection": "jobs", "document_id": "job1", "proposed_fields": JOB_FIELDS},
        headers=auth_header("u1", company_id="c1"),
    )
    assert r.status_code == 200
    assert r.json()["allowed"] is True
    assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_create_for_foreign_org_is_denied(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={
            "operation": "create",
            "collection": "jobs",
            "document_id": "job3",
            "proposed_fields": {**JOB_FIELDS, "orgId": {"stringValue": "c2"}},
        },
        headers=auth_header("u1", company_id="c1"),
    )
    assert r.status_code == 200
    assert r.json() == {"allowed": False, "reason": "scope denied"}


@pytest.mark.asyncio
async def test_missing_token_is_evaluated_as_unauthenticated(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/decisions",
        json={"operation": "read", "collection": "jobs", "document_id": "job1", "existing_fields": JOB_FIELDS},
    )
    assert r.status_code == 200
    assert r.json() == {"allowed": False, "reason": "unauthenticated"}


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/decisions",
        json={"operation": "read", "collection": "jobs"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_malformed_fields_are_unprocessable(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={
            "operation": "create",
            "collection": "jobs",
            "proposed_fields": {"status": {"integerValue": "many"}},
        },
        headers=auth_header("u1"),
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_client_timestamp_on_update_is_forged(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={
            "operation": "update",
            "collection": "jobs",
            "document_id": "job1",
            "existing_fields": JOB_FIELDS,
            "proposed_fields": {
                "status": {"stringValue": "closed"},
                "updatedAt": {"timestampValue": "2020-01-01T00:00:00Z"},
            },
            "request_time": "2026-10-18T12:00:00Z",
        },
        headers=auth_header("u1"),
    )
    assert r.json() == {"allowed": False, "reason": "server field forged"}


@pytest.mark.asyncio
async def test_update_stamped_with_request_time_is_allowed(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={
            "operation": "update",
            "collection": "jobs",
            "document_id": "job1",
            "existing_fields": JOB_FIELDS,
            "proposed_fields": {
                "status": {"stringValue": "closed"},
                "updatedAt": {"timestampValue": "2026-10-18T12:00:00Z"},
            },
            "request_time": "2026-10-18T12:00:00Z",
        },
        headers=auth_header("u1"),
    )
    assert r.json()["allowed"] is True


@pytest.mark.asyncio
async def test_request_time_without_offset_is_read_as_utc(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions",
        json={
            "operation": "update",
            "collection": "jobs",
            "document_id": "job1",
            "existing_fields": JOB_FIELDS,
            "proposed_fields": {
                "status": {"stringValue": "closed"},
                "updatedAt": {"timestampValue": "2026-10-18T12:00:00Z"},
            },
            "request_time": "2026-10-18T12:00:00",
        },
        headers=auth_header("u1"),
    )
    assert r.json() == {"allowed": True, "reason": "update: owner in org or admin"}


@pytest.mark.asyncio
async def test_batch_filters_listing_per_document(client: httpx.AsyncClient, auth_header) -> None:
    r = await client.post(
        "/v1/decisions/batch",
        json={
            "items": [
                {"operation": "list", "collection": "jobs", "existing_fields": {"orgId": {"stringValue": "c1"}}},
                {"operation": "read", "collection": "jobs", "document_id": "job1", "existing_fields": JOB_FIELDS},
                {
                    "operation": "read",
                    "collection": "jobs",
                    "document_id": "job9",
                    "existing_fields": {"ownerId": {"stringValue": "u7"}, "orgId": {"stringValue": "c2"}},
                },
                {"operation": "read", "collection": "payments", "document_id": "p1"},
            ]
        },
        headers=auth_header("u3", company_id="c1"),
    )
    assert r.status_code == 200
    assert [d["allowed"] for d in r.json()["decisions"]] == [True, True, False, False]
    assert r.json()["decisions"][3]["reason"] == "default deny"


@pytest.mark.asyncio
async def test_audit_trail_is_admin_only(client: httpx.AsyncClient, auth_header) -> None:
    await client.post(
        "/v1/decisions",
        json={"operation": "create", "collection": "jobs", "document_id": "job1", "proposed_fields": JOB_FIELDS},
        headers=auth_header("u1"),
    )
    await client.post(
        "/v1/decisions",
        json={"operation": "create", "collection": "jobs", "document_id": "job2", "proposed_fields": {}},
        headers=auth_header("u1"),
    )

    r = await client.get("/v1/decisions/audit", headers=auth_header("u1"))
    assert r.status_code == 403

    r = await client.get("/v1/decisions/audit", headers=auth_header("a1", role="admin", company_id="c9"))
    assert r.status_code == 200
    records = r.json()
    assert len(records) == 2
    denied = [rec for rec in records if not rec["allowed"]]
    assert len(denied) == 1
    assert denied[0]["reason"] == "required field missing"
    assert denied[0]["details"]["missing_fields"] == ["orgId", "ownerId", "status"]
    assert all(rec["request_id"] for rec in records)

    r = await client.get(
        "/v1/decisions/audit",
        params={"allowed": "true"},
        headers=auth_header("a1", role="admin", company_id="c9"),
    )
    assert [rec["document_id"] for rec in r.json()] == ["job1"]


@pytest.mark.asyncio
async def test_audit_requires_token(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/decisions/audit")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_dev_token_carries_custom_claims(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/dev/token",
        json={"subject": "u1", "role": "worker", "company_id": "c1"},
    )
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await client.post(
        "/v1/decisions",
        json={"operation": "create", "collection": "jobs", "document_id": "job1", "proposed_fields": JOB_FIELDS},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.json()["allowed"] is True


@pytest.mark.asyncio
async def test_dev_token_hidden_in_prod(tmp_path) -> None:
    settings = Settings(
        env="prod",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'prod.db'}",
        json_logs=False,
    )
    app = create_app(settings=settings)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.post("/v1/dev/token", json={"subject": "u1", "company_id": "c1"})
    assert r.status_code == 404
