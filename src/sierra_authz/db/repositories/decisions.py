"""
sierra_authz.db.repositories.decisions

Repository for `DecisionRecord` entities.

Responsibilities:
- Append decision audit records.
- Query recent decisions (optionally filtered) for internal review.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from sierra_authz.db.models import DecisionRecord
from sierra_authz.engine.models import Decision, Operation, Principal, Resource


class DecisionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        principal: Principal,
        operation: Operation,
        resource: Resource,
        decision: Decision,
        request_id: str | None = None,
    ) -> DecisionRecord:
        # Records are append-only (no update/delete) in normal operation.
        details: dict[str, Any] = {}
        if decision.validation is not None and not decision.validation.ok:
            details = {
                "missing_fields": sorted(decision.validation.missing_fields),
                "type_errors": sorted(decision.validation.type_errors),
            }
        rec = DecisionRecord(
            request_id=request_id,
            subject_id=principal.subject_id,
            role=principal.role.value,
            company_id=principal.company_id,
            authenticated=principal.authenticated,
            operation=operation.value,
            collection=resource.collection,
            document_id=resource.document_id,
            allowed=decision.allowed,
            reason=decision.reason,
            details=details,
        )
        self._session.add(rec)
        await self._session.flush()
        return rec

    async def list_recent(
        self,
        *,
        collection: str | None = None,
        subject_id: str | None = None,
        allowed: bool | None = None,
        limit: int = 200,
    ) -> list[DecisionRecord]:
        # Newest-first for review tooling.
        stmt = select(DecisionRecord)
        if collection is not None:
            stmt = stmt.where(DecisionRecord.collection == collection)
        if subject_id is not None:
            stmt = stmt.where(DecisionRecord.subject_id == subject_id)
        if allowed is not None:
            stmt = stmt.where(DecisionRecord.allowed == allowed)
        stmt = stmt.order_by(desc(DecisionRecord.created_at)).limit(limit)
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Queries filter on indexed columns (collection/subject/allowed/created_at).
