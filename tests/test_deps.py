"""
tests/test_deps.py — Access Gate & Request Dependency Tests
============================================================

These tests verify:
- JWT_SECRET validation rejects every entry of the weak-secret list
- Bearer tokens issued by the auth router pass the gate
- Tokens that are forged, expired, malformed or carry no subject do not
- Pagination bounds come from the loaded config
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from quickask.api import deps
from quickask.api.auth import create_access_token
from quickask.config import DEFAULT_CONFIG
from quickask.errors import Unauthenticated


def _bearer(token: str) -> str:
    return f"Bearer {token}"


# ===========================================================================
# Secret validation
# ===========================================================================
class TestSecretValidation:
    @pytest.mark.parametrize("weak", sorted(deps._WEAK_SECRETS - {""}))
    def test_rejects_weak_defaults(self, monkeypatch, weak):
        monkeypatch.setenv("JWT_SECRET", weak)
        with pytest.raises(RuntimeError, match="known weak default"):
            deps._load_jwt_secret()

    @pytest.mark.parametrize("value", [None, ""])
    def test_rejects_missing(self, monkeypatch, value):
        if value is None:
            monkeypatch.delenv("JWT_SECRET", raising=False)
        else:
            monkeypatch.setenv("JWT_SECRET", value)
        with pytest.raises(RuntimeError, match="not set"):
            deps._load_jwt_secret()

    def test_rejects_one_char_under_minimum(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "k" * (deps._MIN_SECRET_LENGTH - 1))
        with pytest.raises(RuntimeError, match="too short"):
            deps._load_jwt_secret()

    def test_accepts_minimum_length(self, monkeypatch):
        secret = "k" * deps._MIN_SECRET_LENGTH
        monkeypatch.setenv("JWT_SECRET", secret)
        assert deps._load_jwt_secret() == secret

    def test_module_secret_was_validated(self):
        assert len(deps.JWT_SECRET) >= deps._MIN_SECRET_LENGTH
        assert deps.JWT_SECRET not in deps._WEAK_SECRETS


# ===========================================================================
# Bearer token decoding
# ===========================================================================
class TestDecodeUserId:
    def test_accepts_issued_token(self):
        token = create_access_token(42, DEFAULT_CONFIG.token_ttl_days)
        assert deps._decode_user_id(_bearer(token)) == 42

    def test_rejects_token_signed_with_another_secret(self):
        forged = jwt.encode(
            {"sub": "42"}, deps.JWT_SECRET[::-1] + "z", algorithm=deps.JWT_ALGORITHM
        )
        with pytest.raises(Unauthenticated, match="Invalid token"):
            deps._decode_user_id(_bearer(forged))

    def test_rejects_expired_token(self):
        expired = jwt.encode(
            {"sub": "42", "exp": datetime.now(UTC) - timedelta(minutes=1)},
            deps.JWT_SECRET,
            algorithm=deps.JWT_ALGORITHM,
        )
        with pytest.raises(Unauthenticated, match="Invalid token"):
            deps._decode_user_id(_bearer(expired))

    @pytest.mark.parametrize("payload", [{}, {"sub": "not-a-number"}])
    def test_rejects_bad_subject(self, payload):
        token = jwt.encode(payload, deps.JWT_SECRET, algorithm=deps.JWT_ALGORITHM)
        with pytest.raises(Unauthenticated, match="Invalid token"):
            deps._decode_user_id(_bearer(token))

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Token abc", "bearer abc"])
    def test_rejects_missing_bearer(self, header):
        with pytest.raises(Unauthenticated, match="Missing bearer token"):
            deps._decode_user_id(header)

    def test_optional_identity_degrades_to_anonymous(self):
        token = create_access_token(7, DEFAULT_CONFIG.token_ttl_days)
        assert deps.get_optional_user_id(_bearer(token)) == 7
        assert deps.get_optional_user_id(None) is None
        assert deps.get_optional_user_id("Bearer not.a.jwt") is None


# ===========================================================================
# Pagination
# ===========================================================================
class TestPagination:
    def test_default_limit_from_config(self):
        page = deps.get_pagination(page=2, limit=None, cfg=DEFAULT_CONFIG)
        assert page == deps.Pagination(page=2, limit=DEFAULT_CONFIG.default_page_size)

    def test_limit_capped_at_max_page_size(self):
        cfg = replace(DEFAULT_CONFIG, max_page_size=25)
        assert deps.get_pagination(page=1, limit=500, cfg=cfg).limit == 25
