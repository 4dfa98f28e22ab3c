"""
sierra_authz.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create the audit tables for local development and tests.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from sierra_authz.db import models  # noqa: F401  # register models on Base.metadata
from sierra_authz.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create tables if they don't exist. Production runs Alembic migrations instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
