"""
quickask.services.listing — Question & Answer Serialization
============================================================

Turns ORM rows into the JSON-ready dicts the listing views return.  Used by
the question, answer and favorite services.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quickask.database.models import Answer, Question


def isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


def question_item(q: Question, answer_count: int, *, with_author: bool = True) -> dict:
    item = {
        "id": q.id,
        "title": q.title,
        "description": q.description or "",
    }
    if with_author:
        item["userName"] = q.author.username
        item["avatar"] = q.author.avatar
    item.update({
        "time": isoformat(q.created_at),
        "viewCount": q.view_count or 0,
        "answerCount": answer_count,
    })
    return item


def answer_counts(session: Session, question_ids: list[int]) -> dict[int, int]:
    """Map question id → number of answers, in one grouped query."""
    if not question_ids:
        return {}
    rows = session.execute(
        select(Answer.question_id, func.count().label("cnt"))
        .where(Answer.question_id.in_(question_ids))
        .group_by(Answer.question_id)
    ).all()
    return {row.question_id: row.cnt for row in rows}
