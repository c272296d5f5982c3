"""
quickask.constants — Shared Constants
======================================

Single source of truth for the level span, content limits and presentation
defaults.  Import from here instead of duplicating in services and routes.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Leveling
# ---------------------------------------------------------------------------
# Progress points needed to advance one level.  levelProgress lives in
# [0, LEVEL_SPAN) for every delta below LEVEL_SPAN.
LEVEL_SPAN = 100

STARTING_LEVEL = 1


# ---------------------------------------------------------------------------
# Content limits (mirrored by the pydantic request models)
# ---------------------------------------------------------------------------
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 2000
MAX_ANSWER_LENGTH = 2000
MAX_BIO_LENGTH = 200
MIN_PASSWORD_LENGTH = 6

# Mainland China mobile numbers: 11 digits, leading 1.
PHONE_PATTERN = r"^1[3-9]\d{9}$"

DEFAULT_AVATAR_URL = "https://via.placeholder.com/150"

# Password reset tokens expire after one hour.
RESET_TOKEN_TTL_SECONDS = 3600


# ---------------------------------------------------------------------------
# Answer sort orders
# ---------------------------------------------------------------------------
SORT_BY_TIME = "time"
SORT_BY_LIKES = "likes"
