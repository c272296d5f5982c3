"""
tests/test_favorite_service.py — Favorite Toggle & Listing Integration Tests
=============================================================================
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from conftest import make_question, make_user
from quickask.database.models import Favorite
from quickask.errors import NotFound
from quickask.services import favorite_service


@pytest.fixture
def engine(db_engine):
    return db_engine


def _favorite_count(engine, user_id: int, question_id: int) -> int:
    with Session(engine) as session:
        return session.scalar(
            select(func.count()).select_from(Favorite).where(
                Favorite.user_id == user_id, Favorite.question_id == question_id
            )
        )


class TestToggleFavorite:
    def test_round_trip(self, engine):
        uid = make_user(engine, "reader")
        qid = make_question(engine, make_user(engine, "asker"))

        assert favorite_service.toggle_favorite(engine, qid, uid) == {"isFavorite": True}
        assert _favorite_count(engine, uid, qid) == 1

        assert favorite_service.toggle_favorite(engine, qid, uid) == {"isFavorite": False}
        assert _favorite_count(engine, uid, qid) == 0

    def test_missing_question(self, engine):
        uid = make_user(engine, "reader")
        with pytest.raises(NotFound, match="Question not found"):
            favorite_service.toggle_favorite(engine, 404, uid)

    def test_concurrent_add_reports_favorited_without_duplicate(self, engine):
        """The loser of an add/add race hits the unique constraint and still succeeds."""
        uid = make_user(engine, "racer")
        qid = make_question(engine, make_user(engine, "asker"))
        favorite_service.toggle_favorite(engine, qid, uid)

        # Simulate a stale read: this request did not see the winner's row.
        with patch.object(favorite_service, "_find_favorite", return_value=None):
            result = favorite_service.toggle_favorite(engine, qid, uid)

        assert result == {"isFavorite": True}
        assert _favorite_count(engine, uid, qid) == 1

    def test_is_favorite_for_anonymous(self, engine):
        qid = make_question(engine, make_user(engine, "asker"))
        with Session(engine) as session:
            assert favorite_service.is_favorite(session, qid, None) is False


class TestListFavorites:
    def test_newest_favorite_first_with_total(self, engine):
        uid = make_user(engine, "collector")
        asker = make_user(engine, "asker")
        first = make_question(engine, asker, "First?")
        second = make_question(engine, asker, "Second?")
        favorite_service.toggle_favorite(engine, first, uid)
        favorite_service.toggle_favorite(engine, second, uid)

        data = favorite_service.list_favorites(engine, uid, page=1, limit=10)

        assert data["total"] == 2
        assert [f["id"] for f in data["favorites"]] == [second, first]
        item = data["favorites"][0]
        assert item["userName"] == "asker"
        assert item["answerCount"] == 0

    def test_pagination(self, engine):
        uid = make_user(engine, "collector")
        asker = make_user(engine, "asker")
        for i in range(3):
            favorite_service.toggle_favorite(engine, make_question(engine, asker, f"Q{i}"), uid)

        page2 = favorite_service.list_favorites(engine, uid, page=2, limit=2)
        assert page2["total"] == 3
        assert len(page2["favorites"]) == 1
