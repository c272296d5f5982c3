"""
quickask.services.answer_service — Answers
===========================================

Listing answers under a question (with the viewer's reaction flags),
posting an answer (+10 points to the author) and the "my answers" view.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import joinedload

from quickask.constants import SORT_BY_LIKES
from quickask.database.engine import get_session
from quickask.database.models import Answer, Question, ReactionState, RewardKind
from quickask.engine.events import reward_for
from quickask.errors import NotFound
from quickask.services.listing import isoformat
from quickask.services.reaction_service import get_reaction_states
from quickask.services.reward_service import apply_rewards

logger = logging.getLogger(__name__)


def list_answers(
    engine: Engine,
    question_id: int,
    viewer_id: int | None = None,
    *,
    page: int,
    limit: int,
    sort: str = "time",
) -> dict:
    """Answers under *question_id*.

    ``sort="likes"`` orders by likes (ties newest first); anything else is
    newest first.  ``isLiked``/``isDisliked`` reflect *viewer_id* and are
    False for anonymous viewers.

    Raises
    ------
    NotFound
        If the question does not exist.
    """
    if sort == SORT_BY_LIKES:
        order = (Answer.likes.desc(), Answer.created_at.desc(), Answer.id.desc())
    else:
        order = (Answer.created_at.desc(), Answer.id.desc())

    with get_session(engine) as session:
        if session.get(Question, question_id) is None:
            raise NotFound("Question not found")

        total = session.scalar(
            select(func.count()).select_from(Answer).where(Answer.question_id == question_id)
        ) or 0
        answers = session.scalars(
            select(Answer)
            .options(joinedload(Answer.author))
            .where(Answer.question_id == question_id)
            .order_by(*order)
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        states = get_reaction_states(session, [a.id for a in answers], viewer_id)
        items = []
        for a in answers:
            state = states.get(a.id, ReactionState.NEUTRAL)
            items.append({
                "id": a.id,
                "content": a.content,
                "userName": a.author.username,
                "avatar": a.author.avatar,
                "time": isoformat(a.created_at),
                "likes": a.likes or 0,
                "isLiked": state == ReactionState.LIKED,
                "isDisliked": state == ReactionState.DISLIKED,
            })
        return {"total": total, "answers": items}


def create_answer(engine: Engine, question_id: int, author_id: int, content: str) -> int:
    """Post an answer and award the author. Returns the new id.

    Raises
    ------
    NotFound
        If the question does not exist.
    """
    with get_session(engine) as session:
        if session.get(Question, question_id) is None:
            raise NotFound("Question not found")

        answer = Answer(question_id=question_id, user_id=author_id, content=content)
        session.add(answer)
        session.flush()

        apply_rewards(session, [
            reward_for(
                RewardKind.ANSWER_POSTED,
                author_id,
                source_id=answer.id,
                metadata={"question_id": question_id},
            )
        ])
        logger.info(
            "User %s answered question %s (answer %s)", author_id, question_id, answer.id
        )
        return answer.id


def list_my_answers(engine: Engine, user_id: int, *, page: int, limit: int) -> dict:
    """Answers written by *user_id*, newest first, with their question titles."""
    with get_session(engine) as session:
        total = session.scalar(
            select(func.count()).select_from(Answer).where(Answer.user_id == user_id)
        ) or 0
        answers = session.scalars(
            select(Answer)
            .options(joinedload(Answer.question))
            .where(Answer.user_id == user_id)
            .order_by(Answer.created_at.desc(), Answer.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()
        return {
            "total": total,
            "answers": [
                {
                    "id": a.id,
                    "questionId": a.question_id,
                    "questionTitle": a.question.title,
                    "content": a.content,
                    "time": isoformat(a.created_at),
                    "likes": a.likes or 0,
                }
                for a in answers
            ],
        }
