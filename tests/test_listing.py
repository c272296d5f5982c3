"""
tests/test_listing.py — Serialization Helper Tests
===================================================
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from conftest import make_answer, make_question, make_user
from quickask.database.models import Question
from quickask.services.listing import answer_counts, isoformat, question_item


def test_isoformat():
    assert isoformat(None) is None
    assert isoformat(date(2024, 2, 29)) == "2024-02-29"


def test_answer_counts_groups_by_question(db_engine):
    uid = make_user(db_engine, "asker")
    busy = make_question(db_engine, uid, "Busy")
    quiet = make_question(db_engine, uid, "Quiet")
    for _ in range(3):
        make_answer(db_engine, busy, uid)

    with Session(db_engine) as session:
        assert answer_counts(session, []) == {}
        assert answer_counts(session, [busy, quiet]) == {busy: 3}


def test_question_item_with_and_without_author(db_engine):
    uid = make_user(db_engine, "asker")
    qid = make_question(db_engine, uid, "Why?")

    with Session(db_engine) as session:
        question = session.get(Question, qid)
        full = question_item(question, 2)
        bare = question_item(question, 2, with_author=False)

    assert full["userName"] == "asker"
    assert full["title"] == "Why?"
    assert full["answerCount"] == 2
    assert full["viewCount"] == 0
    assert full["time"] is not None
    assert "userName" not in bare
    assert "avatar" not in bare
