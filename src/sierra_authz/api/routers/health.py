"""
sierra_authz.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from sierra_authz.api.deps import catalog_dep, db_session
from sierra_authz.catalog import SchemaCatalog

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    catalog: SchemaCatalog = Depends(catalog_dep),
) -> dict[str, Any]:
    # Readiness: audit store reachable and schemas loaded.
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "collections": list(catalog.collections())}
