"""
quickask.services.user_service — Accounts & Profiles
=====================================================

Registration, password login, password reset, and the profile/statistics
views.  Passwords are hashed with passlib; reputation fields (points, level,
level_progress) are never writable from here.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import UTC, date, datetime, timedelta

from passlib.context import CryptContext
from sqlalchemy import Engine, func, or_, select
from sqlalchemy.exc import IntegrityError

from quickask.constants import DEFAULT_AVATAR_URL, RESET_TOKEN_TTL_SECONDS
from quickask.database.engine import get_session
from quickask.database.models import Answer, Question, User
from quickask.errors import Conflict, NotFound, Unauthenticated, ValidationFailed

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

PHONE_TAKEN = "Phone number is already registered"
USERNAME_TAKEN = "Username is already taken"
BAD_CREDENTIALS = "Phone or password is incorrect"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def profile_of(user: User) -> dict:
    """Public profile fields of *user*."""
    return {
        "username": user.username,
        "avatar": user.avatar,
        "bio": user.bio or "",
        "birthday": user.birthday.isoformat() if user.birthday else None,
        "level": user.level,
        "levelProgress": user.level_progress,
        "points": user.points,
    }


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _taken(exc: IntegrityError) -> Conflict:
    """Map a users unique-constraint violation to the matching Conflict."""
    # SQLite names the column (users.phone), PostgreSQL the constraint (uq_users_phone).
    return Conflict(PHONE_TAKEN if "phone" in str(exc.orig) else USERNAME_TAKEN)


# ---------------------------------------------------------------------------
# Registration & login
# ---------------------------------------------------------------------------
def register(
    engine: Engine,
    username: str,
    phone: str,
    password: str,
    avatar: str | None = None,
) -> tuple[int, dict]:
    """Create an account. Returns ``(user_id, profile)``.

    Raises
    ------
    Conflict
        If the phone or the username is already in use.
    """
    with get_session(engine) as session:
        existing = session.scalar(
            select(User).where(or_(User.phone == phone, User.username == username))
        )
        if existing is not None:
            raise Conflict(PHONE_TAKEN if existing.phone == phone else USERNAME_TAKEN)

        user = User(
            username=username,
            phone=phone,
            password_hash=hash_password(password),
            avatar=avatar or DEFAULT_AVATAR_URL,
            bio="",
            points=0,
            level=1,
            level_progress=0,
        )
        try:
            with session.begin_nested():
                session.add(user)
                session.flush()
        except IntegrityError as exc:
            logger.info("Registration race for phone %s / username %s", phone, username)
            raise _taken(exc) from exc
        logger.info("Registered user %s (%s)", user.id, username)
        return user.id, profile_of(user)


def authenticate(engine: Engine, phone: str, password: str) -> tuple[int, dict]:
    """Check a phone/password pair. Returns ``(user_id, profile)``.

    Raises
    ------
    Unauthenticated
        If the phone is unknown or the password does not match.
    """
    with get_session(engine) as session:
        user = session.scalar(select(User).where(User.phone == phone))
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for phone %s", phone)
            raise Unauthenticated(BAD_CREDENTIALS)
        return user.id, profile_of(user)


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------
def request_password_reset(engine: Engine, phone: str) -> str:
    """Issue a one-hour reset token for *phone* and return it.

    Delivering the token to the user is left to an outer layer.

    Raises
    ------
    NotFound
        If no account uses *phone*.
    """
    with get_session(engine) as session:
        user = session.scalar(select(User).where(User.phone == phone))
        if user is None:
            raise NotFound("Phone number is not registered")

        token = secrets.token_hex(20)
        user.reset_token = _hash_token(token)
        user.reset_expires = datetime.now(UTC) + timedelta(seconds=RESET_TOKEN_TTL_SECONDS)
        logger.info("Issued password reset token for user %s", user.id)
        return token


def reset_password(engine: Engine, token: str, new_password: str) -> None:
    """Set a new password using a reset token, then clear the token.

    Raises
    ------
    ValidationFailed
        If the token is unknown or expired.
    """
    with get_session(engine) as session:
        user = session.scalar(select(User).where(User.reset_token == _hash_token(token)))
        if (
            user is None
            or user.reset_expires is None
            or _aware(user.reset_expires) <= datetime.now(UTC)
        ):
            raise ValidationFailed("Reset token is invalid or has expired")

        user.password_hash = hash_password(new_password)
        user.reset_token = None
        user.reset_expires = None
        logger.info("Password reset for user %s", user.id)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------
def _get_user(session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def get_profile(engine: Engine, user_id: int) -> dict:
    with get_session(engine) as session:
        return profile_of(_get_user(session, user_id))


def update_profile(
    engine: Engine,
    user_id: int,
    *,
    username: str | None = None,
    bio: str | None = None,
    birthday: date | None = None,
    avatar: str | None = None,
) -> dict:
    """Update the editable profile fields; ``None`` leaves a field alone.

    Raises
    ------
    NotFound
        If the user does not exist.
    Conflict
        If *username* belongs to someone else.
    """
    with get_session(engine) as session:
        if username:
            holder = session.scalar(select(User.id).where(User.username == username))
            if holder is not None and holder != user_id:
                raise Conflict(USERNAME_TAKEN)

        user = _get_user(session, user_id)
        if username and username != user.username:
            try:
                with session.begin_nested():
                    user.username = username
                    session.flush()
            except IntegrityError as exc:
                raise _taken(exc) from exc
        if bio is not None:
            user.bio = bio
        if birthday is not None:
            user.birthday = birthday
        if avatar:
            user.avatar = avatar
        session.flush()
        return profile_of(user)


def get_statistics(engine: Engine, user_id: int) -> dict:
    """Question and answer counts; follower counts are always zero."""
    with get_session(engine) as session:
        questions = session.scalar(
            select(func.count()).select_from(Question).where(Question.user_id == user_id)
        ) or 0
        answers = session.scalar(
            select(func.count()).select_from(Answer).where(Answer.user_id == user_id)
        ) or 0
        return {
            "questions": questions,
            "answers": answers,
            "followers": 0,
            "following": 0,
        }
