"""
quickask.engine.events — RewardEvent and base point values
===========================================================

A reward event is a (recipient, point-delta) pair emitted by an action —
a like received, a question posted, an answer posted.  Toggle engines and
content services emit them; :mod:`quickask.services.reward_service` consumes
them through the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from quickask.database.models import RewardKind

__all__ = ["BASE_POINTS", "RewardEvent", "reward_for"]

# ---------------------------------------------------------------------------
# Points per reward kind
# ---------------------------------------------------------------------------
BASE_POINTS: dict[RewardKind, int] = {
    RewardKind.LIKE_RECEIVED: 2,
    RewardKind.QUESTION_POSTED: 5,
    RewardKind.ANSWER_POSTED: 10,
}


@dataclass(frozen=True, slots=True)
class RewardEvent:
    """Points owed to ``recipient_id`` because of ``kind``.

    ``source_id`` names the answer or question that caused the award.
    """

    recipient_id: int
    kind: RewardKind
    delta: int
    source_id: int | None = None
    metadata: dict = field(default_factory=dict)


def reward_for(
    kind: RewardKind,
    recipient_id: int,
    *,
    source_id: int | None = None,
    metadata: dict | None = None,
) -> RewardEvent:
    """Build a :class:`RewardEvent` carrying the base points for *kind*."""
    return RewardEvent(
        recipient_id=recipient_id,
        kind=kind,
        delta=BASE_POINTS[kind],
        source_id=source_id,
        metadata=metadata or {},
    )
