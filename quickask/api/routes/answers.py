"""
quickask.api.routes.answers — Answer reactions and "my answers"
================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from quickask.api.deps import Pagination, get_current_user_id, get_engine, get_pagination
from quickask.api.responses import ok
from quickask.database.engine import run_db
from quickask.services import answer_service, reaction_service

router = APIRouter(prefix="/answers", tags=["answers"])


@router.get("/my")
async def list_my_answers(
    pagination: Pagination = Depends(get_pagination),
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(
        answer_service.list_my_answers,
        engine,
        user_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ok(data)


@router.post("/{answer_id}/like")
async def toggle_like(
    answer_id: int,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    """Returns ``{isLiked, likes}``."""
    data = await run_db(reaction_service.toggle_like, engine, answer_id, user_id)
    return ok(data)


@router.post("/{answer_id}/dislike")
async def toggle_dislike(
    answer_id: int,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    """Returns ``{isDisliked}``."""
    data = await run_db(reaction_service.toggle_dislike, engine, answer_id, user_id)
    return ok(data)
