"""
quickask.services.question_service — Question Lifecycle
========================================================

Create (+5 points to the author), read (bumps ``view_count``), edit and
delete (owner only), plus the paginated listings.

Deleting a question removes its answers, their reactions and every favorite
pointing at it.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, func, select, update
from sqlalchemy.orm import Session, joinedload

from quickask.database.engine import get_session
from quickask.database.models import Answer, Question, RewardKind
from quickask.engine.events import reward_for
from quickask.errors import Forbidden, NotFound
from quickask.services.favorite_service import is_favorite
from quickask.services.listing import answer_counts, question_item
from quickask.services.reward_service import apply_rewards

logger = logging.getLogger(__name__)


def _page(session: Session, query, count_query, *, page: int, limit: int) -> tuple[int, list[Question]]:
    total = session.scalar(count_query) or 0
    rows = session.scalars(
        query.order_by(Question.created_at.desc(), Question.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return total, list(rows)


def _get_owned(session: Session, question_id: int, actor_id: int, verb: str) -> Question:
    question = session.get(Question, question_id)
    if question is None:
        raise NotFound("Question not found")
    if question.user_id != actor_id:
        raise Forbidden(f"Not allowed to {verb} this question")
    return question


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------
def list_questions(engine: Engine, *, page: int, limit: int) -> dict:
    """All questions, newest first."""
    with get_session(engine) as session:
        total, questions = _page(
            session,
            select(Question).options(joinedload(Question.author)),
            select(func.count()).select_from(Question),
            page=page,
            limit=limit,
        )
        counts = answer_counts(session, [q.id for q in questions])
        return {
            "total": total,
            "questions": [question_item(q, counts.get(q.id, 0)) for q in questions],
        }


def list_my_questions(engine: Engine, user_id: int, *, page: int, limit: int) -> dict:
    """Questions written by *user_id*, newest first."""
    with get_session(engine) as session:
        total, questions = _page(
            session,
            select(Question).where(Question.user_id == user_id),
            select(func.count()).select_from(Question).where(Question.user_id == user_id),
            page=page,
            limit=limit,
        )
        counts = answer_counts(session, [q.id for q in questions])
        return {
            "total": total,
            "questions": [
                question_item(q, counts.get(q.id, 0), with_author=False)
                for q in questions
            ],
        }


def list_unanswered(engine: Engine, user_id: int, *, page: int, limit: int) -> dict:
    """Questions *user_id* neither asked nor answered, newest first."""
    answered = select(Answer.question_id).where(Answer.user_id == user_id)
    condition = (Question.user_id != user_id) & Question.id.not_in(answered)

    with get_session(engine) as session:
        total, questions = _page(
            session,
            select(Question).options(joinedload(Question.author)).where(condition),
            select(func.count()).select_from(Question).where(condition),
            page=page,
            limit=limit,
        )
        counts = answer_counts(session, [q.id for q in questions])
        return {
            "total": total,
            "questions": [question_item(q, counts.get(q.id, 0)) for q in questions],
        }


# ---------------------------------------------------------------------------
# Single question
# ---------------------------------------------------------------------------
def get_question(engine: Engine, question_id: int, viewer_id: int | None = None) -> dict:
    """Return one question and count the view.

    ``isFavorite`` is False for anonymous viewers.

    Raises
    ------
    NotFound
        If the question does not exist.
    """
    with get_session(engine) as session:
        bumped = session.execute(
            update(Question)
            .where(Question.id == question_id)
            .values(view_count=Question.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        if bumped.rowcount == 0:
            raise NotFound("Question not found")

        question = session.scalar(
            select(Question)
            .options(joinedload(Question.author))
            .where(Question.id == question_id)
            .execution_options(populate_existing=True)
        )
        count = answer_counts(session, [question.id]).get(question.id, 0)
        item = question_item(question, count)
        item["isFavorite"] = is_favorite(session, question.id, viewer_id)
        return item


def create_question(
    engine: Engine, author_id: int, title: str, description: str = ""
) -> int:
    """Insert a question and award the author. Returns the new id."""
    with get_session(engine) as session:
        question = Question(user_id=author_id, title=title, description=description or "")
        session.add(question)
        session.flush()

        apply_rewards(session, [
            reward_for(RewardKind.QUESTION_POSTED, author_id, source_id=question.id)
        ])
        logger.info("User %s posted question %s", author_id, question.id)
        return question.id


def update_question(
    engine: Engine,
    question_id: int,
    actor_id: int,
    *,
    title: str,
    description: str | None = None,
) -> int:
    """Edit title/description. Owner only.

    Raises
    ------
    NotFound
        If the question does not exist.
    Forbidden
        If *actor_id* is not the author.
    """
    with get_session(engine) as session:
        question = _get_owned(session, question_id, actor_id, "edit")
        question.title = title
        question.description = description or ""
        return question.id


def delete_question(engine: Engine, question_id: int, actor_id: int) -> None:
    """Delete a question with its answers, reactions and favorites. Owner only.

    Raises
    ------
    NotFound
        If the question does not exist.
    Forbidden
        If *actor_id* is not the author.
    """
    with get_session(engine) as session:
        question = _get_owned(session, question_id, actor_id, "delete")
        session.delete(question)
        logger.info("User %s deleted question %s", actor_id, question_id)
