"""
quickask.services.reconciliation_service — Like Counter Reconciliation
=======================================================================

Validates the denormalized ``answers.likes`` counter against the
``answer_reactions`` rows and corrects drift if found.

How it works:
    1. Count LIKED reactions grouped by answer.
    2. Compare against each answer's stored ``likes``.
    3. On mismatch, overwrite the counter with the true count.
    4. Log all corrections for audit.

Drift can only appear on databases without row locks (SQLite), where two
concurrent toggles may both write from the same snapshot.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import Engine, func, select

from quickask.database.engine import get_session
from quickask.database.models import Answer, AnswerReaction, ReactionState

logger = logging.getLogger(__name__)


def reconcile_likes(engine: Engine) -> dict:
    """Validate every answer's ``likes`` against its LIKED reactions and fix drift.

    Returns ``{"checked": N, "corrected": M, "corrections": [...], "timestamp": ...}``.
    """
    corrections: list[dict] = []

    with get_session(engine) as session:
        truth_rows = session.execute(
            select(AnswerReaction.answer_id, func.count().label("actual"))
            .where(AnswerReaction.state == ReactionState.LIKED.value)
            .group_by(AnswerReaction.answer_id)
        ).all()
        truth_map: dict[int, int] = {row.answer_id: row.actual for row in truth_rows}

        answers = session.scalars(select(Answer).with_for_update()).all()
        checked = 0
        for answer in answers:
            checked += 1
            stored = answer.likes or 0
            actual = max(truth_map.get(answer.id, 0), 0)
            if stored != actual:
                corrections.append({
                    "answer_id": answer.id,
                    "stored": stored,
                    "actual": actual,
                    "diff": actual - stored,
                })
                answer.likes = actual

    if corrections:
        logger.warning(
            "Like reconciliation: corrected %d/%d answers: %s",
            len(corrections), checked, corrections,
        )
    else:
        logger.info("Like reconciliation: all %d answers match", checked)

    return {
        "checked": checked,
        "corrected": len(corrections),
        "corrections": corrections,
        "timestamp": datetime.now(UTC).isoformat(),
    }
