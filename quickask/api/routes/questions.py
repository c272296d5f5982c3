"""
quickask.api.routes.questions — Questions, their answers and favorites
=======================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from quickask.api.deps import (
    Pagination,
    get_current_user_id,
    get_engine,
    get_optional_user_id,
    get_pagination,
)
from quickask.api.responses import ok
from quickask.constants import (
    MAX_ANSWER_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    SORT_BY_LIKES,
    SORT_BY_TIME,
)
from quickask.database.engine import run_db
from quickask.services import answer_service, favorite_service, question_service

router = APIRouter(prefix="/questions", tags=["questions"])


class QuestionBody(BaseModel):
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)


class AnswerBody(BaseModel):
    content: str = Field(min_length=1, max_length=MAX_ANSWER_LENGTH)


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------
@router.get("")
async def list_questions(
    pagination: Pagination = Depends(get_pagination),
    engine=Depends(get_engine),
):
    data = await run_db(
        question_service.list_questions,
        engine,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ok(data)


@router.get("/my/list")
async def list_my_questions(
    pagination: Pagination = Depends(get_pagination),
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(
        question_service.list_my_questions,
        engine,
        user_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ok(data)


@router.get("/unanswered/list")
async def list_unanswered(
    pagination: Pagination = Depends(get_pagination),
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    """Questions the caller neither asked nor answered."""
    data = await run_db(
        question_service.list_unanswered,
        engine,
        user_id,
        page=pagination.page,
        limit=pagination.limit,
    )
    return ok(data)


# ---------------------------------------------------------------------------
# Single question
# ---------------------------------------------------------------------------
@router.post("")
async def create_question(
    body: QuestionBody,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    question_id = await run_db(
        question_service.create_question, engine, user_id, body.title, body.description
    )
    return ok({"id": question_id}, "Question posted")


@router.get("/{question_id}")
async def get_question(
    question_id: int,
    viewer_id: int | None = Depends(get_optional_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(question_service.get_question, engine, question_id, viewer_id)
    return ok(data)


@router.put("/{question_id}")
async def update_question(
    question_id: int,
    body: QuestionBody,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    updated = await run_db(
        question_service.update_question,
        engine,
        question_id,
        user_id,
        title=body.title,
        description=body.description,
    )
    return ok({"id": updated}, "Question updated")


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    await run_db(question_service.delete_question, engine, question_id, user_id)
    return ok(message="Question deleted")


# ---------------------------------------------------------------------------
# Answers & favorite
# ---------------------------------------------------------------------------
@router.get("/{question_id}/answers")
async def list_answers(
    question_id: int,
    sort: str = Query(SORT_BY_TIME, pattern=f"^({SORT_BY_TIME}|{SORT_BY_LIKES})$"),
    pagination: Pagination = Depends(get_pagination),
    viewer_id: int | None = Depends(get_optional_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(
        answer_service.list_answers,
        engine,
        question_id,
        viewer_id,
        page=pagination.page,
        limit=pagination.limit,
        sort=sort,
    )
    return ok(data)


@router.post("/{question_id}/answers")
async def create_answer(
    question_id: int,
    body: AnswerBody,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    answer_id = await run_db(
        answer_service.create_answer, engine, question_id, user_id, body.content
    )
    return ok({"id": answer_id}, "Answer posted")


@router.post("/{question_id}/favorite")
async def toggle_favorite(
    question_id: int,
    user_id: int = Depends(get_current_user_id),
    engine=Depends(get_engine),
):
    data = await run_db(favorite_service.toggle_favorite, engine, question_id, user_id)
    return ok(data)
