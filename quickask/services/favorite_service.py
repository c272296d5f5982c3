"""
quickask.services.favorite_service — Favorite Toggle & Listing
===============================================================

The ``uq_favorites_user_question`` constraint guarantees one row per
(user, question).  Two concurrent "add" toggles can both see the pair as
absent; the loser's INSERT hits the constraint inside a SAVEPOINT, which is
rolled back while the outer transaction carries on, and the call reports
the pair as favorited.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from quickask.database.engine import get_session
from quickask.database.models import Favorite, Question
from quickask.engine.favorites import FavoriteAction, toggle_favorite as _toggle
from quickask.errors import NotFound
from quickask.services.listing import answer_counts, question_item

logger = logging.getLogger(__name__)


def _find_favorite(session: Session, user_id: int, question_id: int) -> Favorite | None:
    return session.scalar(
        select(Favorite).where(
            Favorite.user_id == user_id, Favorite.question_id == question_id
        )
    )


def is_favorite(session: Session, question_id: int, user_id: int | None) -> bool:
    """True if *user_id* has favorited *question_id*; False for anonymous."""
    if user_id is None:
        return False
    return _find_favorite(session, user_id, question_id) is not None


def toggle_favorite(engine: Engine, question_id: int, user_id: int) -> dict:
    """Flip the (user, question) favorite.

    Returns ``{"isFavorite": bool}``.

    Raises
    ------
    NotFound
        If the question does not exist.
    """
    with get_session(engine) as session:
        question = session.scalar(
            select(Question).where(Question.id == question_id).with_for_update()
        )
        if question is None:
            raise NotFound("Question not found")

        existing = _find_favorite(session, user_id, question_id)
        outcome = _toggle(existing is not None)

        if outcome.action == FavoriteAction.REMOVE:
            session.delete(existing)
            return {"isFavorite": False}

        try:
            with session.begin_nested():   # SAVEPOINT
                session.add(Favorite(user_id=user_id, question_id=question_id))
                session.flush()
        except IntegrityError:
            # Another request favorited the pair between our read and write.
            logger.info(
                "Favorite race on question %s for user %s; already favorited",
                question_id, user_id,
            )
        return {"isFavorite": True}


def list_favorites(engine: Engine, user_id: int, *, page: int, limit: int) -> dict:
    """Paginated favorites of *user_id*, newest favorite first."""
    offset = (page - 1) * limit
    with get_session(engine) as session:
        total = session.scalar(
            select(func.count()).select_from(Favorite).where(Favorite.user_id == user_id)
        ) or 0

        favorites = session.scalars(
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .options(joinedload(Favorite.question).joinedload(Question.author))
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()

        questions = [f.question for f in favorites]
        counts = answer_counts(session, [q.id for q in questions])
        return {
            "total": total,
            "favorites": [question_item(q, counts.get(q.id, 0)) for q in questions],
        }
