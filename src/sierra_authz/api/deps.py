"""
sierra_authz.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, the schema catalog and DB sessions.
- Encapsulate app.state access patterns (settings/catalog/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sierra_authz.catalog import SchemaCatalog
from sierra_authz.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are bound once in `sierra_authz.api.app.create_app`.
    return request.app.state.settings  # type: ignore[attr-defined]


def catalog_dep(request: Request) -> SchemaCatalog:
    return request.app.state.catalog  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created during app lifespan startup.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Reading from app.state (not the cached global settings) lets tests build apps
# with their own Settings instances.
