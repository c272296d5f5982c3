"""
quickask.errors — Service Error Taxonomy
=========================================

Services raise these; the API turns them into the ``{"code", "message"}``
envelope with the matching HTTP status (see :mod:`quickask.api.main`).
"""

from __future__ import annotations

__all__ = [
    "Conflict",
    "Forbidden",
    "NotFound",
    "QuickAskError",
    "Unauthenticated",
    "ValidationFailed",
]


class QuickAskError(Exception):
    """Base class for every error a service may surface to a caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailed(QuickAskError):
    status_code = 400


class Unauthenticated(QuickAskError):
    status_code = 401


class Forbidden(QuickAskError):
    status_code = 403


class NotFound(QuickAskError):
    status_code = 404


class Conflict(QuickAskError):
    status_code = 409
