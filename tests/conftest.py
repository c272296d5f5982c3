"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of quickask.api.deps which validates
# the secret at module-load time.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine, event  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from quickask.config import DEFAULT_CONFIG  # noqa: E402
from quickask.database.models import Answer, Base, Question, User  # noqa: E402


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINTs behave on pysqlite.

    Also switches on foreign key enforcement, which SQLite leaves off.
    """

    @event.listens_for(engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all QuickAsk tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session that rolls back after each test."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------
_phone_seq = iter(range(13800000000, 13899999999))


def make_user(
    engine: Engine,
    username: str,
    *,
    points: int = 0,
    level: int = 1,
    level_progress: int = 0,
) -> int:
    """Insert a user directly (no password hashing) and return its id."""
    with Session(engine) as session:
        user = User(
            username=username,
            phone=str(next(_phone_seq)),
            password_hash="not-a-real-hash",
            points=points,
            level=level,
            level_progress=level_progress,
        )
        session.add(user)
        session.commit()
        return user.id


def make_question(engine: Engine, author_id: int, title: str = "How do levels work?") -> int:
    with Session(engine) as session:
        question = Question(user_id=author_id, title=title, description="")
        session.add(question)
        session.commit()
        return question.id


def make_answer(
    engine: Engine, question_id: int, author_id: int, content: str = "Like this.", likes: int = 0
) -> int:
    with Session(engine) as session:
        answer = Answer(
            question_id=question_id, user_id=author_id, content=content, likes=likes
        )
        session.add(answer)
        session.commit()
        return answer.id


def reload_user(engine: Engine, user_id: int) -> User:
    with Session(engine, expire_on_commit=False) as session:
        return session.get(User, user_id)


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
def make_token(user_id: int) -> str:
    """Issue a valid access token for *user_id*."""
    from quickask.api.auth import create_access_token

    return create_access_token(user_id, DEFAULT_CONFIG.token_ttl_days)


def auth_header(user_id: int) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def client(db_engine):
    """A TestClient wired to the in-memory engine and the default config."""
    from fastapi.testclient import TestClient

    from quickask.api import main

    main.app.dependency_overrides[main.get_engine] = lambda: db_engine
    main.app.dependency_overrides[main.get_config] = lambda: DEFAULT_CONFIG
    yield TestClient(main.app, raise_server_exceptions=False)
    main.app.dependency_overrides.clear()
