"""
quickask.api.deps — FastAPI dependency injection
=================================================

The access gate lives here: :func:`get_current_user_id` for routes that
need an identity and :func:`get_optional_user_id` for reads that also serve
anonymous viewers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Header, Query
from jwt.exceptions import InvalidTokenError
from sqlalchemy import Engine

from quickask.config import QuickAskConfig, load_config
from quickask.database.engine import create_db_engine, get_session, run_db
from quickask.database.models import User
from quickask.errors import Unauthenticated

logger = logging.getLogger(__name__)

_WEAK_SECRETS = frozenset({
    "quickcust-secret-key",
    "quickask-dev-secret-change-me",
    "change-me",
    "secret",
    "dev",
    "",
})

_MIN_SECRET_LENGTH = 32

JWT_ALGORITHM = "HS256"


def _load_jwt_secret() -> str:
    """Load and validate JWT_SECRET from the environment.

    Raises RuntimeError at import time if the secret is missing, blank,
    too short (< 32 chars), or a known weak default.
    """
    secret = os.getenv("JWT_SECRET", "")
    if not secret:
        raise RuntimeError(
            "JWT_SECRET environment variable is not set. "
            "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(64))\""
        )
    if secret in _WEAK_SECRETS:
        raise RuntimeError(
            f"JWT_SECRET is set to a known weak default ('{secret}'). "
            "Please set a strong, unique secret."
        )
    if len(secret) < _MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET is too short ({len(secret)} chars). "
            f"Minimum length is {_MIN_SECRET_LENGTH} characters."
        )
    return secret


JWT_SECRET: str = _load_jwt_secret()


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> QuickAskConfig:
    return load_config()


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Pagination:
    page: int
    limit: int


def get_pagination(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    cfg: QuickAskConfig = Depends(get_config),
) -> Pagination:
    """``page``/``limit`` query params, with ``limit`` capped at ``max_page_size``."""
    size = limit or cfg.default_page_size
    return Pagination(page=page, limit=min(size, cfg.max_page_size))


# ---------------------------------------------------------------------------
# Access gate
# ---------------------------------------------------------------------------
def _decode_user_id(authorization: str | None) -> int:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated("Missing bearer token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthenticated("Missing bearer token")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return int(payload["sub"])
    except (InvalidTokenError, KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid token")


def _user_exists(engine: Engine, user_id: int) -> bool:
    with get_session(engine) as session:
        return session.get(User, user_id) is not None


async def get_current_user_id(
    authorization: Annotated[str | None, Header()] = None,
    engine: Engine = Depends(get_engine),
) -> int:
    """Resolve the bearer token to a user id. Raises 401 if absent or invalid."""
    user_id = _decode_user_id(authorization)
    if not await run_db(_user_exists, engine, user_id):
        logger.info("Token for unknown user %s rejected", user_id)
        raise Unauthenticated("Invalid token")
    return user_id


def get_optional_user_id(
    authorization: Annotated[str | None, Header()] = None,
) -> int | None:
    """Like :func:`get_current_user_id`, but anonymous (``None``) instead of 401."""
    if not authorization:
        return None
    try:
        return _decode_user_id(authorization)
    except Unauthenticated:
        return None
