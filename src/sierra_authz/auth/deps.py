"""
sierra_authz.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Allow anonymous callers where the decision itself must report `unauthenticated`.
- Gate admin-only endpoints.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from sierra_authz.api.deps import settings_dep
from sierra_authz.auth.claims import principal_from_claims
from sierra_authz.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from sierra_authz.engine.models import Principal
from sierra_authz.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_optional_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    # No token: evaluate as an unauthenticated principal (the engine denies it).
    if creds is None or not creds.credentials:
        return Principal.anonymous()

    try:
        # Authn: validate signature and registered claims (iss/aud/exp/sub...).
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    principal = principal_from_claims(payload)
    if not principal.authenticated:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")
    return principal


def get_principal(principal: Principal = Depends(get_optional_principal)) -> Principal:
    if not principal.authenticated:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return principal


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
    return principal


# --- Module Notes -----------------------------------------------------------
# Decision endpoints use `get_optional_principal`; audit endpoints use `require_admin`.
