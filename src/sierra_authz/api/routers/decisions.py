"""
sierra_authz.api.routers.decisions

Decision endpoints for the document-store request pipeline.

Responsibilities:
- Evaluate single and batched access requests for the bearer-token principal.
- Decode Firestore REST document snapshots into engine resources.
- Expose the decision audit trail to admins.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from sierra_authz.api.deps import catalog_dep, db_session, settings_dep
from sierra_authz.auth.deps import get_optional_principal, require_admin
from sierra_authz.catalog import SchemaCatalog
from sierra_authz.codec.firestore_values import ValueDecodeError, decode_fields
from sierra_authz.db.repositories.decisions import DecisionRepo
from sierra_authz.engine import Decision, Operation, Principal, Resource
from sierra_authz.services.decision_service import DecisionService
from sierra_authz.settings import Settings

router = APIRouter(prefix="/v1/decisions", tags=["decisions"])


class DecisionRequest(BaseModel):
    operation: Operation
    collection: str = Field(min_length=1, max_length=256)
    document_id: str = Field(default="", max_length=1500)
    # Firestore REST `fields` objects, e.g. {"status": {"stringValue": "open"}}.
    existing_fields: dict[str, Any] | None = None
    proposed_fields: dict[str, Any] | None = None
    # Trusted clock supplied by the pipeline; defaults to the server clock.
    request_time: datetime | None = None


class DecisionResponse(BaseModel):
    allowed: bool
    reason: str


class BatchDecisionRequest(BaseModel):
    items: list[DecisionRequest] = Field(min_length=1, max_length=500)


class BatchDecisionResponse(BaseModel):
    decisions: list[DecisionResponse]


class DecisionRecordResponse(BaseModel):
    id: uuid.UUID
    request_id: str | None
    subject_id: str
    role: str
    company_id: str
    authenticated: bool
    operation: str
    collection: str
    document_id: str
    allowed: bool
    reason: str
    details: dict[str, Any]
    created_at: datetime


def _decode(fields: dict[str, Any] | None, label: str) -> dict[str, Any] | None:
    if fields is None:
        return None
    try:
        return decode_fields(fields)
    except ValueDecodeError as e:
        raise HTTPException(status_code=422, detail=f"{label}: {e}") from e


def _to_resource(body: DecisionRequest, now: datetime) -> Resource:
    request_time = body.request_time or now
    if request_time.tzinfo is None:
        # Same rule the codec applies to timestampValue: no offset means UTC.
        request_time = request_time.replace(tzinfo=UTC)
    return Resource(
        collection=body.collection,
        document_id=body.document_id,
        existing_data=_decode(body.existing_fields, "existing_fields"),
        proposed_data=_decode(body.proposed_fields, "proposed_fields"),
        request_time=request_time,
    )


def _to_response(decision: Decision) -> DecisionResponse:
    return DecisionResponse(allowed=decision.allowed, reason=decision.reason)


@router.post("", response_model=DecisionResponse)
async def create_decision(
    body: DecisionRequest,
    principal: Principal = Depends(get_optional_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    catalog: SchemaCatalog = Depends(catalog_dep),
) -> DecisionResponse:
    resource = _to_resource(body, datetime.now(tz=UTC))
    svc = DecisionService(session=session, settings=settings, catalog=catalog)
    decision = await svc.evaluate(principal=principal, operation=body.operation, resource=resource)
    return _to_response(decision)


@router.post("/batch", response_model=BatchDecisionResponse)
async def create_decisions_batch(
    body: BatchDecisionRequest,
    principal: Principal = Depends(get_optional_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    catalog: SchemaCatalog = Depends(catalog_dep),
) -> BatchDecisionResponse:
    # All items share one request-time value, as a single pipeline request would.
    now = datetime.now(tz=UTC)
    requests = [(item.operation, _to_resource(item, now)) for item in body.items]
    svc = DecisionService(session=session, settings=settings, catalog=catalog)
    decisions = await svc.evaluate_many(principal=principal, requests=requests)
    return BatchDecisionResponse(decisions=[_to_response(d) for d in decisions])


@router.get(
    "/audit",
    response_model=list[DecisionRecordResponse],
    dependencies=[Depends(require_admin)],
)
async def list_decision_records(
    collection: str | None = None,
    subject_id: str | None = None,
    allowed: bool | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    session: AsyncSession = Depends(db_session),
) -> list[DecisionRecordResponse]:
    records = await DecisionRepo(session).list_recent(
        collection=collection, subject_id=subject_id, allowed=allowed, limit=limit
    )
    return [DecisionRecordResponse.model_validate(r, from_attributes=True) for r in records]


# --- Module Notes -----------------------------------------------------------
# The pipeline maps any `allowed=false` to a generic "permission denied" for end users;
# `reason` is for its own telemetry.
