"""
quickask.services.reward_service — Reward Application
======================================================

Shared by every service that awards points.  Runs inside the caller's
session so the content change and the point award commit together.

For each :class:`RewardEvent`:
  1. Lock the recipient row (``SELECT … FOR UPDATE``; a no-op on SQLite)
  2. Apply the ledger (points, level, level_progress)
  3. Append a ``point_log`` row
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from quickask.database.models import PointLog, User
from quickask.engine.events import RewardEvent
from quickask.engine.ledger import LedgerResult, apply_to_user

logger = logging.getLogger(__name__)


def lock_user(session: Session, user_id: int) -> User | None:
    """Load *user_id* under a row lock, refreshing any stale identity."""
    return session.scalar(
        select(User)
        .where(User.id == user_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def apply_rewards(
    session: Session, events: Iterable[RewardEvent]
) -> list[LedgerResult]:
    """Apply each reward event to its recipient within *session*.

    Zero-point events and events for users that no longer exist are skipped.
    Returns one :class:`LedgerResult` per applied event.
    """
    results: list[LedgerResult] = []
    for event in events:
        if event.delta == 0:
            continue

        user = lock_user(session, event.recipient_id)
        if user is None:
            logger.warning(
                "Reward %s for missing user %s skipped", event.kind, event.recipient_id
            )
            continue

        result = apply_to_user(user, event.delta)
        session.add(PointLog(
            user_id=user.id,
            kind=event.kind.value,
            delta=event.delta,
            level_before=result.before.level,
            level_after=result.after.level,
            source_id=event.source_id,
            metadata_=event.metadata or None,
        ))
        logger.debug(
            "Awarded %d points to user %s for %s (total %d)",
            event.delta, user.id, event.kind, result.after.points,
        )
        results.append(result)

    session.flush()
    return results
