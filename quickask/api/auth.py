"""
quickask.api.auth — Phone/password accounts + JWT issuance
===========================================================
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quickask.api.deps import (
    JWT_ALGORITHM,
    JWT_SECRET,
    get_config,
    get_current_user_id,
    get_engine,
)
from quickask.api.responses import ok
from quickask.config import QuickAskConfig
from quickask.constants import MIN_PASSWORD_LENGTH, PHONE_PATTERN
from quickask.database.engine import run_db
from quickask.services import user_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------
class RegisterBody(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    phone: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    avatar: str | None = None


class LoginBody(BaseModel):
    phone: str = Field(pattern=PHONE_PATTERN)
    password: str = Field(min_length=1)


class ForgotPasswordBody(BaseModel):
    phone: str = Field(pattern=PHONE_PATTERN)


class ResetPasswordBody(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(alias="newPassword", min_length=MIN_PASSWORD_LENGTH)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
def create_access_token(user_id: int, ttl_days: int) -> str:
    payload = {
        "sub": str(user_id),
        "iat": datetime.now(UTC),
        "exp": datetime.now(UTC) + timedelta(days=ttl_days),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def _session_payload(user_id: int, profile: dict, cfg: QuickAskConfig) -> dict:
    return {
        "userId": user_id,
        "token": create_access_token(user_id, cfg.token_ttl_days),
        "userProfile": profile,
    }


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/register")
async def register(
    body: RegisterBody,
    cfg: QuickAskConfig = Depends(get_config),
    engine=Depends(get_engine),
):
    """Create an account and log it in."""
    user_id, profile = await run_db(
        user_service.register,
        engine,
        body.username,
        body.phone,
        body.password,
        body.avatar or cfg.default_avatar_url,
    )
    return ok(_session_payload(user_id, profile, cfg), "Registered")


@router.post("/login")
async def login(
    body: LoginBody,
    cfg: QuickAskConfig = Depends(get_config),
    engine=Depends(get_engine),
):
    """Exchange phone + password for a JWT."""
    user_id, profile = await run_db(
        user_service.authenticate, engine, body.phone, body.password
    )
    return ok(_session_payload(user_id, profile, cfg), "Logged in")


@router.post("/forgot-password")
async def forgot_password(body: ForgotPasswordBody, engine=Depends(get_engine)):
    """Issue a password reset token; the token is never echoed back."""
    await run_db(user_service.request_password_reset, engine, body.phone)
    return ok(message="Password reset code sent")


@router.post("/reset-password")
async def reset_password(body: ResetPasswordBody, engine=Depends(get_engine)):
    await run_db(user_service.reset_password, engine, body.token, body.new_password)
    return ok(message="Password has been reset")


@router.post("/logout")
async def logout(user_id: int = Depends(get_current_user_id)):
    """Tokens are stateless; the client discards its copy."""
    logger.debug("User %s logged out", user_id)
    return ok(message="Logged out")
