"""
sierra_authz.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Create the async sessionmaker with safe defaults.
- Derive the synchronous URL used by migrations.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sierra_authz.settings import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    # pool_pre_ping helps detect stale connections in long-lived processes.
    return create_async_engine(settings.database_url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps audit rows readable after the request commits.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


def sync_database_url(url: str) -> str:
    """
    Map the async runtime URL to the driver Alembic runs migrations with.

    Only aiosqlite is declared, so only its suffix is stripped; other URLs pass through unchanged.
    """

    return url.replace("+aiosqlite", "")
