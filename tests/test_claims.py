"""
tests.test_claims

Token verification and custom-claims normalization.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from sierra_authz.auth.claims import principal_from_claims
from sierra_authz.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from sierra_authz.engine import Principal, Role

CFG = JwtConfig(alg="HS256", issuer="sierra-painting", audience="sierra-authz", secret="test-secret")


def test_role_and_company_claims() -> None:
    p = principal_from_claims({"sub": "u1", "role": "admin", "companyId": "test-company-staging"})
    assert p == Principal(subject_id="u1", role=Role.admin, company_id="test-company-staging")


def test_roles_list_and_snake_case_company() -> None:
    p = principal_from_claims({"sub": "adminUser", "roles": ["admin"], "company_id": "company-a"})
    assert p.is_admin
    assert p.company_id == "company-a"


@pytest.mark.parametrize("role", ["staff", "crew", "manager", "worker", None, 3])
def test_other_roles_get_worker_privileges(role) -> None:
    assert principal_from_claims({"sub": "u1", "role": role}).role is Role.worker


def test_missing_subject_is_unauthenticated() -> None:
    p = principal_from_claims({"role": "admin", "companyId": "c1"})
    assert p.authenticated is False
    assert not p.is_admin


def test_issue_and_decode_round_trip() -> None:
    token = issue_token(cfg=CFG, subject="u1", claims={"role": "worker", "companyId": "c1"})
    payload = decode_and_validate(cfg=CFG, token=token)
    assert principal_from_claims(payload) == Principal(subject_id="u1", company_id="c1")


def test_custom_claims_cannot_override_registered_claims() -> None:
    token = issue_token(cfg=CFG, subject="u1", claims={"sub": "admin", "aud": "elsewhere"})
    payload = decode_and_validate(cfg=CFG, token=token)
    assert payload["sub"] == "u1"


def test_wrong_audience_is_rejected() -> None:
    other = JwtConfig(alg="HS256", issuer="sierra-painting", audience="other", secret="test-secret")
    token = issue_token(cfg=other, subject="u1")
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)


def test_expired_token_is_rejected() -> None:
    token = issue_token(cfg=CFG, subject="u1", ttl=timedelta(seconds=-5))
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)
