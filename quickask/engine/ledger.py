"""
quickask.engine.ledger — Points & Level Carry-Over
===================================================

Pure calculation, no DB I/O.  Given a user's reputation triple and a point
award, produce the next triple.

Carry-over is **single-step**: when progress reaches ``LEVEL_SPAN`` the user
gains exactly one level and keeps ``progress - LEVEL_SPAN``.  Awards are all
far below ``LEVEL_SPAN``, so one subtraction is always enough; an award of
``LEVEL_SPAN`` or more would leave progress at or above the span.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quickask.constants import LEVEL_SPAN

if TYPE_CHECKING:
    from quickask.database.models import User

logger = logging.getLogger(__name__)

__all__ = ["LedgerResult", "LevelState", "apply_points", "apply_to_user"]


@dataclass(frozen=True, slots=True)
class LevelState:
    """A user's reputation triple."""

    points: int = 0
    level: int = 1
    level_progress: int = 0

    @classmethod
    def of(cls, user: User) -> LevelState:
        return cls(
            points=user.points or 0,
            level=user.level or 1,
            level_progress=user.level_progress or 0,
        )


@dataclass(frozen=True, slots=True)
class LedgerResult:
    """Outcome of one award."""

    before: LevelState
    after: LevelState

    @property
    def leveled_up(self) -> bool:
        return self.after.level > self.before.level


def apply_points(state: LevelState, delta: int) -> LedgerResult:
    """Award *delta* points to *state*.

    A zero delta returns the state unchanged.

    Raises
    ------
    ValueError
        If *delta* is negative — points are only ever awarded.
    """
    if delta < 0:
        raise ValueError(f"Point awards must be non-negative, got {delta}")

    progress = state.level_progress + delta
    level = state.level
    if progress >= LEVEL_SPAN:
        level += 1
        progress -= LEVEL_SPAN

    after = LevelState(
        points=state.points + delta,
        level=level,
        level_progress=progress,
    )
    return LedgerResult(before=state, after=after)


def apply_to_user(user: User, delta: int) -> LedgerResult:
    """Apply :func:`apply_points` to a loaded :class:`User` row in place.

    The caller owns the session and must persist the change.
    """
    result = apply_points(LevelState.of(user), delta)
    user.points = result.after.points
    user.level = result.after.level
    user.level_progress = result.after.level_progress
    if result.leveled_up:
        logger.info(
            "User %s leveled up: %d → %d", user.id, result.before.level, result.after.level
        )
    return result
