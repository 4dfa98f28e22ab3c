"""
sierra_authz.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `SIERRA_AUTHZ_`); defaults are safe for local dev.
    """

    model_config = SettingsConfigDict(env_prefix="SIERRA_AUTHZ_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and dev token minting.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "sierra-authz"
    log_level: str = "INFO"
    json_logs: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth (tokens carry `role` and `companyId` custom claims)
    jwt_alg: str = "HS256"
    jwt_issuer: str = "sierra-painting"
    jwt_audience: str = "sierra-authz"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)

    # Persistence (decision audit trail)
    database_url: str = "sqlite+aiosqlite:///./sierra_authz.db"
    audit_decisions: bool = True

    # Optional JSON file replacing the built-in collection schemas.
    schemas_file: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly and pass it to `create_app`, bypassing the cache.
