"""
quickask.api.routes.favorites — The caller's favorited questions
=================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from quickask.api.deps import Pagination, get_current_user_id, get_engine, get_pagination
from quickask.api.responses import ok
from quickask.database.engine import run_db
from quickask.services import favorite_service

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("")
async def list_favorites(
    pagination: Pagination = Depends(get_pagination),
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(
        favorite_service.list_favorites,
        engine,
        user_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ok(data)
