"""
quickask.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- users             — Community members with their reputation triple
                      (points, level, level_progress)
- questions         — Questions posted by users
- answers           — Answers with a denormalized ``likes`` counter
- answer_reactions  — Per (answer, user) like/dislike state; no row = neutral
- favorites         — User ↔ question bookmarks, unique per pair
- point_log         — Append-only journal of applied reward events
"""

from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    JSON,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from quickask.constants import DEFAULT_AVATAR_URL, STARTING_LEVEL


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all QuickAsk ORM models."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReactionState(enum.StrEnum):
    """Where one user stands on one answer.

    Only LIKED and DISLIKED are ever stored; NEUTRAL is the absence of an
    ``answer_reactions`` row.
    """
    NEUTRAL = "NEUTRAL"
    LIKED = "LIKED"
    DISLIKED = "DISLIKED"


class RewardKind(enum.StrEnum):
    """Actions that earn points."""
    LIKE_RECEIVED = "LIKE_RECEIVED"
    QUESTION_POSTED = "QUESTION_POSTED"
    ANSWER_POSTED = "ANSWER_POSTED"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(String(500), default=DEFAULT_AVATAR_URL)
    bio: Mapped[str] = mapped_column(String(200), default="")
    birthday: Mapped[date | None] = mapped_column(Date, default=None)

    # Reputation: written only by quickask.engine.ledger
    points: Mapped[int] = mapped_column(Integer, default=0)
    level: Mapped[int] = mapped_column(Integer, default=STARTING_LEVEL)
    level_progress: Mapped[int] = mapped_column(Integer, default=0)

    reset_token: Mapped[str | None] = mapped_column(String(64), default=None)
    reset_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=None
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    questions: Mapped[list[Question]] = relationship(back_populates="author")
    answers: Mapped[list[Answer]] = relationship(back_populates="author")
    favorites: Mapped[list[Favorite]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("phone", name="uq_users_phone"),
        CheckConstraint("points >= 0", name="ck_users_points_nonnegative"),
        CheckConstraint("level >= 1", name="ck_users_level_positive"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} name={self.username!r} lvl={self.level}>"


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------
class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    view_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    author: Mapped[User] = relationship(back_populates="questions")
    answers: Mapped[list[Answer]] = relationship(
        back_populates="question", cascade="all, delete-orphan"
    )
    favorites: Mapped[list[Favorite]] = relationship(
        back_populates="question", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_questions_created", "created_at"),
        Index("ix_questions_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Question id={self.id} title={self.title!r}>"


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------
class Answer(Base):
    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Denormalized count of LIKED reactions; kept >= 0.
    likes: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    question: Mapped[Question] = relationship(back_populates="answers")
    author: Mapped[User] = relationship(back_populates="answers")
    reactions: Mapped[list[AnswerReaction]] = relationship(
        back_populates="answer", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_answers_likes_nonnegative"),
        Index("ix_answers_question_created", "question_id", "created_at"),
        Index("ix_answers_user", "user_id"),
    )

    @property
    def users_liked(self) -> set[int]:
        return {r.user_id for r in self.reactions if r.state == ReactionState.LIKED}

    @property
    def users_disliked(self) -> set[int]:
        return {r.user_id for r in self.reactions if r.state == ReactionState.DISLIKED}

    def __repr__(self) -> str:
        return f"<Answer id={self.id} question={self.question_id} likes={self.likes}>"


# ---------------------------------------------------------------------------
# AnswerReaction — one row per (answer, user) that is not neutral
# ---------------------------------------------------------------------------
class AnswerReaction(Base):
    """Like/dislike held by one user on one answer.

    The composite primary key allows a single state per pair, so a user can
    never be both liking and disliking the same answer.
    """
    __tablename__ = "answer_reactions"

    answer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("answers.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    state: Mapped[str] = mapped_column(String(10), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    answer: Mapped[Answer] = relationship(back_populates="reactions")

    __table_args__ = (
        CheckConstraint(
            "state IN ('LIKED', 'DISLIKED')", name="ck_answer_reactions_state"
        ),
        Index("ix_answer_reactions_user", "user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AnswerReaction answer={self.answer_id} "
            f"user={self.user_id} state={self.state}>"
        )


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------
class Favorite(Base):
    __tablename__ = "favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="favorites")
    question: Mapped[Question] = relationship(back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "question_id", name="uq_favorites_user_question"),
        Index("ix_favorites_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Favorite user={self.user_id} question={self.question_id}>"


# ---------------------------------------------------------------------------
# PointLog — append-only reward journal
# ---------------------------------------------------------------------------
class PointLog(Base):
    __tablename__ = "point_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    delta: Mapped[int] = mapped_column(Integer, nullable=False)
    level_before: Mapped[int] = mapped_column(Integer, nullable=False)
    level_after: Mapped[int] = mapped_column(Integer, nullable=False)
    source_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    metadata_: Mapped[dict | None] = mapped_column(
        "metadata", JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_point_log_user_time", "user_id", "timestamp"),
    )

    def __repr__(self) -> str:
        return f"<PointLog id={self.id} user={self.user_id} kind={self.kind} delta={self.delta}>"
