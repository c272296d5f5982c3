"""
quickask.api.routes.users — Profile and statistics of the caller
=================================================================
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from quickask.api.deps import get_current_user_id, get_engine
from quickask.api.responses import ok
from quickask.constants import MAX_BIO_LENGTH
from quickask.database.engine import run_db
from quickask.services import user_service

router = APIRouter(prefix="/users", tags=["users"])


class ProfileUpdate(BaseModel):
    username: str | None = Field(None, min_length=1, max_length=50)
    bio: str | None = Field(None, max_length=MAX_BIO_LENGTH)
    birthday: date | None = None
    avatar: str | None = None


@router.get("/profile")
async def get_profile(
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(user_service.get_profile, engine, user_id)
    return ok(data)


@router.put("/profile")
async def update_profile(
    body: ProfileUpdate,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(
        user_service.update_profile,
        engine,
        user_id,
        username=body.username,
        bio=body.bio,
        birthday=body.birthday,
        avatar=body.avatar,
    )
    return ok(data, "Profile updated")


@router.get("/statistics")
async def get_statistics(
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(user_service.get_statistics, engine, user_id)
    return ok(data)
