"""
tests/test_question_service.py — Question Lifecycle Integration Tests
======================================================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from conftest import make_answer, make_question, make_user, reload_user
from quickask.database.models import Answer, AnswerReaction, Favorite, PointLog, Question
from quickask.errors import Forbidden, NotFound
from quickask.services import answer_service, favorite_service, question_service, reaction_service


@pytest.fixture
def engine(db_engine):
    return db_engine


def _count(engine, model) -> int:
    with Session(engine) as session:
        return session.scalar(select(func.count()).select_from(model))


class TestCreate:
    def test_create_awards_five_points(self, engine):
        uid = make_user(engine, "asker")
        qid = question_service.create_question(engine, uid, "Why is the sky blue?", "Curious.")

        assert reload_user(engine, uid).points == 5
        with Session(engine) as session:
            question = session.get(Question, qid)
            assert question.title == "Why is the sky blue?"
            assert question.view_count == 0
            log = session.scalars(select(PointLog)).one()
            assert (log.kind, log.delta, log.source_id) == ("QUESTION_POSTED", 5, qid)


class TestGet:
    def test_each_read_counts_a_view(self, engine):
        uid = make_user(engine, "asker")
        qid = make_question(engine, uid)

        question_service.get_question(engine, qid)
        data = question_service.get_question(engine, qid)

        assert data["viewCount"] == 2
        assert data["userName"] == "asker"
        assert data["isFavorite"] is False

    def test_favorite_flag_for_viewer(self, engine):
        asker = make_user(engine, "asker")
        viewer = make_user(engine, "viewer")
        qid = make_question(engine, asker)
        favorite_service.toggle_favorite(engine, qid, viewer)

        assert question_service.get_question(engine, qid, viewer)["isFavorite"] is True
        assert question_service.get_question(engine, qid, asker)["isFavorite"] is False

    def test_missing_question(self, engine):
        with pytest.raises(NotFound):
            question_service.get_question(engine, 12345)


class TestEditDelete:
    def test_owner_can_edit(self, engine):
        uid = make_user(engine, "asker")
        qid = make_question(engine, uid)
        question_service.update_question(engine, qid, uid, title="Edited", description="More")
        with Session(engine) as session:
            question = session.get(Question, qid)
            assert (question.title, question.description) == ("Edited", "More")

    def test_other_user_cannot_edit(self, engine):
        qid = make_question(engine, make_user(engine, "asker"))
        intruder = make_user(engine, "intruder")
        with pytest.raises(Forbidden):
            question_service.update_question(engine, qid, intruder, title="Mine now")

    def test_other_user_cannot_delete(self, engine):
        qid = make_question(engine, make_user(engine, "asker"))
        intruder = make_user(engine, "intruder")
        with pytest.raises(Forbidden):
            question_service.delete_question(engine, qid, intruder)
        assert _count(engine, Question) == 1

    def test_delete_missing(self, engine):
        with pytest.raises(NotFound):
            question_service.delete_question(engine, 77, make_user(engine, "asker"))

    def test_delete_cascades_to_answers_reactions_and_favorites(self, engine):
        asker = make_user(engine, "asker")
        other = make_user(engine, "other")
        qid = make_question(engine, asker)
        aid = make_answer(engine, qid, other)
        reaction_service.toggle_like(engine, aid, asker)
        favorite_service.toggle_favorite(engine, qid, other)

        question_service.delete_question(engine, qid, asker)

        assert _count(engine, Question) == 0
        assert _count(engine, Answer) == 0
        assert _count(engine, AnswerReaction) == 0
        assert _count(engine, Favorite) == 0
        # Points already earned survive the deletion.
        assert reload_user(engine, other).points == 2


class TestListings:
    def test_list_newest_first_with_answer_counts(self, engine):
        uid = make_user(engine, "asker")
        older = make_question(engine, uid, "Older")
        newer = make_question(engine, uid, "Newer")
        make_answer(engine, older, uid)
        make_answer(engine, older, uid)

        data = question_service.list_questions(engine, page=1, limit=10)

        assert data["total"] == 2
        assert [q["id"] for q in data["questions"]] == [newer, older]
        assert data["questions"][1]["answerCount"] == 2
        assert data["questions"][0]["answerCount"] == 0

    def test_my_questions_omit_author_fields(self, engine):
        uid = make_user(engine, "asker")
        make_question(engine, make_user(engine, "someone"))
        mine = make_question(engine, uid)

        data = question_service.list_my_questions(engine, uid, page=1, limit=10)

        assert data["total"] == 1
        assert data["questions"][0]["id"] == mine
        assert "userName" not in data["questions"][0]

    def test_unanswered_excludes_own_and_answered(self, engine):
        me = make_user(engine, "me")
        other = make_user(engine, "other")
        own = make_question(engine, me, "Own")
        answered = make_question(engine, other, "Answered")
        open_question = make_question(engine, other, "Open")
        answer_service.create_answer(engine, answered, me, "Done.")

        data = question_service.list_unanswered(engine, me, page=1, limit=10)

        ids = [q["id"] for q in data["questions"]]
        assert ids == [open_question]
        assert own not in ids
        assert data["total"] == 1
