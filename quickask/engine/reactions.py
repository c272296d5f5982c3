"""
quickask.engine.reactions — Like/Dislike State Machine
=======================================================

Pure transition functions, no DB I/O.  Each (answer, user) pair is in exactly
one :class:`ReactionState`:

    NEUTRAL ──like──▶ LIKED ──like──▶ NEUTRAL
    NEUTRAL ──dislike──▶ DISLIKED ──dislike──▶ NEUTRAL
    DISLIKED ──like──▶ LIKED          (dislike cleared first)
    LIKED ──dislike──▶ DISLIKED       (like cleared first, likes - 1)

Entering LIKED adds one to the answer's ``likes`` counter and, unless the
actor wrote the answer, emits a ``LIKE_RECEIVED`` reward for the author.
Leaving LIKED subtracts one, never below zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from quickask.database.models import ReactionState, RewardKind
from quickask.engine.events import RewardEvent, reward_for

__all__ = [
    "AnswerSnapshot",
    "ReactionOutcome",
    "ReactionState",
    "toggle_dislike",
    "toggle_like",
]


@dataclass(frozen=True, slots=True)
class AnswerSnapshot:
    """Everything a transition needs to know about an answer and the actor."""

    answer_id: int
    author_id: int
    likes: int
    state: ReactionState = ReactionState.NEUTRAL


@dataclass(frozen=True, slots=True)
class ReactionOutcome:
    """Next state for the pair, next counter value, and any rewards owed."""

    previous: ReactionState
    state: ReactionState
    likes: int
    rewards: tuple[RewardEvent, ...] = ()

    @property
    def is_liked(self) -> bool:
        return self.state == ReactionState.LIKED

    @property
    def is_disliked(self) -> bool:
        return self.state == ReactionState.DISLIKED


def _decrement(likes: int) -> int:
    return max(0, likes - 1)


def _like_reward(snapshot: AnswerSnapshot, actor_id: int) -> tuple[RewardEvent, ...]:
    # Liking your own answer counts, but earns nothing.
    if snapshot.author_id == actor_id:
        return ()
    return (
        reward_for(
            RewardKind.LIKE_RECEIVED,
            snapshot.author_id,
            source_id=snapshot.answer_id,
            metadata={"liker_id": actor_id},
        ),
    )


def toggle_like(snapshot: AnswerSnapshot, actor_id: int) -> ReactionOutcome:
    """Flip the actor's like on the answer."""
    if snapshot.state == ReactionState.LIKED:
        return ReactionOutcome(
            previous=snapshot.state,
            state=ReactionState.NEUTRAL,
            likes=_decrement(snapshot.likes),
        )

    # NEUTRAL or DISLIKED → LIKED.  A dislike has no counter to undo.
    return ReactionOutcome(
        previous=snapshot.state,
        state=ReactionState.LIKED,
        likes=max(0, snapshot.likes) + 1,
        rewards=_like_reward(snapshot, actor_id),
    )


def toggle_dislike(snapshot: AnswerSnapshot, actor_id: int) -> ReactionOutcome:
    """Flip the actor's dislike on the answer.  Dislikes never earn points."""
    if snapshot.state == ReactionState.DISLIKED:
        return ReactionOutcome(
            previous=snapshot.state,
            state=ReactionState.NEUTRAL,
            likes=max(0, snapshot.likes),
        )

    likes = snapshot.likes
    if snapshot.state == ReactionState.LIKED:
        likes = _decrement(likes)

    return ReactionOutcome(
        previous=snapshot.state,
        state=ReactionState.DISLIKED,
        likes=max(0, likes),
    )
