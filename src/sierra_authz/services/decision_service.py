"""
sierra_authz.services.decision_service

Decision service (engine invocation + audit owner).

Responsibilities:
- Resolve the collection schema and run the pure decision engine.
- Log every decision with its internal reason code.
- Persist decision audit records and own the transaction boundary.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sierra_authz.catalog import SchemaCatalog
from sierra_authz.db.repositories.decisions import DecisionRepo
from sierra_authz.engine import Decision, Operation, Principal, Resource, decide
from sierra_authz.observability.logging import get_logger
from sierra_authz.settings import Settings

log = get_logger(__name__)


class DecisionService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        catalog: SchemaCatalog,
    ) -> None:
        self._session = session
        self._settings = settings
        self._catalog = catalog
        self._decisions = DecisionRepo(session)

    def _evaluate(self, principal: Principal, operation: Operation, resource: Resource) -> Decision:
        decision = decide(principal, operation, resource, self._catalog.get(resource.collection))
        log.info(
            "decision",
            subject_id=principal.subject_id or None,
            operation=operation.value,
            collection=resource.collection,
            document_id=resource.document_id,
            allowed=decision.allowed,
            reason=decision.reason,
        )
        return decision

    async def _audit(
        self, principal: Principal, operation: Operation, resource: Resource, decision: Decision
    ) -> None:
        if not self._settings.audit_decisions:
            return
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        await self._decisions.add(
            principal=principal,
            operation=operation,
            resource=resource,
            decision=decision,
            request_id=request_id,
        )

    async def evaluate(
        self, *, principal: Principal, operation: Operation, resource: Resource
    ) -> Decision:
        decision = self._evaluate(principal, operation, resource)
        await self._audit(principal, operation, resource, decision)
        await self._session.commit()
        return decision

    async def evaluate_many(
        self,
        *,
        principal: Principal,
        requests: Sequence[tuple[Operation, Resource]],
    ) -> list[Decision]:
        # One transaction for the whole batch; decisions are independent of each other.
        decisions: list[Decision] = []
        for operation, resource in requests:
            decision = self._evaluate(principal, operation, resource)
            await self._audit(principal, operation, resource, decision)
            decisions.append(decision)
        await self._session.commit()
        return decisions


# --- Module Notes -----------------------------------------------------------
# The engine stays pure; logging and persistence happen only at this layer.
