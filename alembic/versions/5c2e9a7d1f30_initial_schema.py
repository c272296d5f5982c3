"""Initial schema: users, questions, answers, reactions, favorites, point log

Revision ID: 5c2e9a7d1f30
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c2e9a7d1f30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=True,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    """Create every QuickAsk table."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("avatar", sa.String(500), nullable=True),
        sa.Column("bio", sa.String(200), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=True),
        sa.Column("level", sa.Integer(), nullable=True),
        sa.Column("level_progress", sa.Integer(), nullable=True),
        sa.Column("reset_token", sa.String(64), nullable=True),
        sa.Column("reset_expires", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("phone", name="uq_users_phone"),
        sa.CheckConstraint("points >= 0", name="ck_users_points_nonnegative"),
        sa.CheckConstraint("level >= 1", name="ck_users_level_positive"),
    )

    op.create_table(
        "questions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=True),
        _created_at(),
        _created_at("updated_at"),
    )
    op.create_index("ix_questions_created", "questions", ["created_at"])
    op.create_index("ix_questions_user", "questions", ["user_id"])

    op.create_table(
        "answers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=True),
        _created_at(),
        sa.CheckConstraint("likes >= 0", name="ck_answers_likes_nonnegative"),
    )
    op.create_index(
        "ix_answers_question_created", "answers", ["question_id", "created_at"]
    )
    op.create_index("ix_answers_user", "answers", ["user_id"])

    op.create_table(
        "answer_reactions",
        sa.Column(
            "answer_id",
            sa.Integer(),
            sa.ForeignKey("answers.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("state", sa.String(10), nullable=False),
        _created_at("updated_at"),
        sa.CheckConstraint(
            "state IN ('LIKED', 'DISLIKED')", name="ck_answer_reactions_state"
        ),
    )
    op.create_index("ix_answer_reactions_user", "answer_reactions", ["user_id"])

    op.create_table(
        "favorites",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "question_id",
            sa.Integer(),
            sa.ForeignKey("questions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "user_id", "question_id", name="uq_favorites_user_question"
        ),
    )
    op.create_index(
        "ix_favorites_user_created", "favorites", ["user_id", "created_at"]
    )

    op.create_table(
        "point_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("delta", sa.Integer(), nullable=False),
        sa.Column("level_before", sa.Integer(), nullable=False),
        sa.Column("level_after", sa.Integer(), nullable=False),
        sa.Column("source_id", sa.Integer(), nullable=True),
        sa.Column(
            "metadata",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
        _created_at("timestamp"),
    )
    op.create_index("ix_point_log_user_time", "point_log", ["user_id", "timestamp"])


def downgrade() -> None:
    """Drop every QuickAsk table."""
    op.drop_index("ix_point_log_user_time", table_name="point_log")
    op.drop_table("point_log")

    op.drop_index("ix_favorites_user_created", table_name="favorites")
    op.drop_table("favorites")

    op.drop_index("ix_answer_reactions_user", table_name="answer_reactions")
    op.drop_table("answer_reactions")

    op.drop_index("ix_answers_user", table_name="answers")
    op.drop_index("ix_answers_question_created", table_name="answers")
    op.drop_table("answers")

    op.drop_index("ix_questions_user", table_name="questions")
    op.drop_index("ix_questions_created", table_name="questions")
    op.drop_table("questions")

    op.drop_table("users")
