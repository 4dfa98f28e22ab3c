"""
sierra_authz.api.app

FastAPI app factory for the authorization decision service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Load the collection schema catalog (fails fast on a bad override file).
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from sierra_authz import __version__
from sierra_authz.api.routers.decisions import router as decisions_router
from sierra_authz.api.routers.dev_auth import router as dev_auth_router
from sierra_authz.api.routers.health import router as health_router
from sierra_authz.catalog import load_catalog
from sierra_authz.db.init_db import init_db
from sierra_authz.db.session import create_engine, create_sessionmaker
from sierra_authz.observability.logging import configure_logging, get_logger
from sierra_authz.observability.middleware import RequestContextMiddleware
from sierra_authz.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.json_logs,
    )
    catalog = load_catalog(settings.schemas_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, collections=list(catalog.collections()))
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Sierra Painting Authorization Decision Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog = catalog

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(decisions_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; decision logic stays in `sierra_authz.engine`.
