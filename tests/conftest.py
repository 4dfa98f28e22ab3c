"""
tests.conftest

Shared fixtures for API tests.

Responsibilities:
- Build an app against a throwaway SQLite file and run its lifespan.
- Provide an httpx client bound to the app (no network).
- Mint bearer tokens with Sierra Painting custom claims.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from sierra_authz.api.app import create_app
from sierra_authz.auth.jwt import JwtConfig, issue_token
from sierra_authz.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'authz.db'}",
        json_logs=False,
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not manage lifespan; run it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_header(settings: Settings) -> Callable[..., dict[str, str]]:
    def _make(subject: str, *, role: str = "worker", company_id: str = "c1") -> dict[str, str]:
        token = issue_token(
            cfg=JwtConfig.from_settings(settings),
            subject=subject,
            claims={"role": role, "companyId": company_id},
        )
        return {"Authorization": f"Bearer {token}"}

    return _make
