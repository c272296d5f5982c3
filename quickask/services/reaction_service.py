"""
quickask.services.reaction_service — Like/Dislike Toggles
==========================================================

Every toggle is one transaction scoped to the answer:

  1. Lock the answer row
  2. Read the actor's current reaction
  3. Run the pure transition (:mod:`quickask.engine.reactions`)
  4. Write the reaction row and the ``likes`` counter
  5. Apply reward events through the ledger
  6. Commit

Concurrent toggles on one answer serialize on the row lock where the
database supports it (PostgreSQL).
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session

from quickask.database.engine import get_session
from quickask.database.models import Answer, AnswerReaction, ReactionState
from quickask.engine.reactions import (
    AnswerSnapshot,
    ReactionOutcome,
    toggle_dislike as _toggle_dislike,
    toggle_like as _toggle_like,
)
from quickask.errors import NotFound
from quickask.services.reward_service import apply_rewards

logger = logging.getLogger(__name__)


def _lock_answer(session: Session, answer_id: int) -> Answer:
    answer = session.scalar(
        select(Answer)
        .where(Answer.id == answer_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if answer is None:
        raise NotFound("Answer not found")
    return answer


def _snapshot(
    session: Session, answer: Answer, user_id: int
) -> tuple[AnswerSnapshot, AnswerReaction | None]:
    row = session.get(AnswerReaction, (answer.id, user_id))
    state = ReactionState(row.state) if row is not None else ReactionState.NEUTRAL
    snapshot = AnswerSnapshot(
        answer_id=answer.id,
        author_id=answer.user_id,
        likes=answer.likes or 0,
        state=state,
    )
    return snapshot, row


def _persist(
    session: Session,
    answer: Answer,
    row: AnswerReaction | None,
    user_id: int,
    outcome: ReactionOutcome,
) -> None:
    if outcome.state == ReactionState.NEUTRAL:
        if row is not None:
            session.delete(row)
    elif row is None:
        session.add(AnswerReaction(
            answer_id=answer.id, user_id=user_id, state=outcome.state.value
        ))
    else:
        row.state = outcome.state.value

    answer.likes = outcome.likes
    apply_rewards(session, outcome.rewards)


def _apply(engine: Engine, answer_id: int, user_id: int, transition) -> ReactionOutcome:
    with get_session(engine) as session:
        answer = _lock_answer(session, answer_id)
        snapshot, row = _snapshot(session, answer, user_id)
        outcome = transition(snapshot, user_id)
        _persist(session, answer, row, user_id, outcome)
        logger.debug(
            "Answer %s: user %s %s → %s (likes=%d)",
            answer_id, user_id, outcome.previous, outcome.state, outcome.likes,
        )
        return outcome


def toggle_like(engine: Engine, answer_id: int, user_id: int) -> dict:
    """Flip *user_id*'s like on *answer_id*.

    Returns ``{"isLiked": bool, "likes": int}``.

    Raises
    ------
    NotFound
        If the answer does not exist.
    """
    outcome = _apply(engine, answer_id, user_id, _toggle_like)
    return {"isLiked": outcome.is_liked, "likes": outcome.likes}


def toggle_dislike(engine: Engine, answer_id: int, user_id: int) -> dict:
    """Flip *user_id*'s dislike on *answer_id*.

    Returns ``{"isDisliked": bool}``.

    Raises
    ------
    NotFound
        If the answer does not exist.
    """
    outcome = _apply(engine, answer_id, user_id, _toggle_dislike)
    return {"isDisliked": outcome.is_disliked}


def get_reaction_states(
    session: Session, answer_ids: list[int], user_id: int | None
) -> dict[int, ReactionState]:
    """Map answer id → the viewer's state for the given answers.

    Anonymous viewers (``user_id is None``) get an empty map, which callers
    read as NEUTRAL everywhere.
    """
    if user_id is None or not answer_ids:
        return {}
    rows = session.execute(
        select(AnswerReaction.answer_id, AnswerReaction.state).where(
            AnswerReaction.user_id == user_id,
            AnswerReaction.answer_id.in_(answer_ids),
        )
    ).all()
    return {row.answer_id: ReactionState(row.state) for row in rows}
