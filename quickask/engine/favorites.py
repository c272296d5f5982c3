"""
quickask.engine.favorites — Favorite Toggle
============================================

A (user, question) pair is either favorited or not.  The transition is a
plain flip; the service decides how to persist it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = ["FavoriteAction", "FavoriteOutcome", "toggle_favorite"]


class FavoriteAction(enum.StrEnum):
    ADD = "ADD"
    REMOVE = "REMOVE"


@dataclass(frozen=True, slots=True)
class FavoriteOutcome:
    action: FavoriteAction

    @property
    def is_favorite(self) -> bool:
        return self.action == FavoriteAction.ADD


def toggle_favorite(currently_favorite: bool) -> FavoriteOutcome:
    """Return the action that flips the pair's current membership."""
    if currently_favorite:
        return FavoriteOutcome(FavoriteAction.REMOVE)
    return FavoriteOutcome(FavoriteAction.ADD)
