"""
sierra_authz.auth.claims

Custom-claims normalization.

Responsibilities:
- Turn verified token claims into the engine's immutable `Principal`.
- Accept the claim shapes used across the app's tooling (`role` or `roles`,
  `companyId` or `company_id`).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sierra_authz.engine.models import Principal, Role


def _role_from_claims(claims: Mapping[str, Any]) -> Role:
    role = claims.get("role")
    if isinstance(role, str) and role.strip().lower() == Role.admin:
        return Role.admin

    roles = claims.get("roles")
    if isinstance(roles, (list, tuple)) and any(
        isinstance(r, str) and r.strip().lower() == Role.admin for r in roles
    ):
        return Role.admin

    # Legacy roles (manager/staff/crew) and unknown values get worker privileges.
    return Role.worker


def _company_from_claims(claims: Mapping[str, Any]) -> str:
    for key in ("companyId", "company_id"):
        value = claims.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def principal_from_claims(claims: Mapping[str, Any]) -> Principal:
    subject = str(claims.get("sub") or claims.get("uid") or "").strip()
    if not subject:
        return Principal.anonymous()
    return Principal(
        subject_id=subject,
        role=_role_from_claims(claims),
        company_id=_company_from_claims(claims),
        authenticated=True,
    )
