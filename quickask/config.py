"""
quickask.config — YAML Configuration Loader
============================================

**Why this file exists:**
This module reads ``config.yaml`` for **infrastructure-only** settings
(community identity, API port, token lifetime, pagination bounds).  Secrets
such as ``JWT_SECRET`` and ``DATABASE_URL`` stay in the environment (``.env``).

Reputation rules (points per action, level span) are not configurable; they
live in :mod:`quickask.engine.events` and :mod:`quickask.constants`.

Usage::

    from quickask.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.community_name)    # "QuickAsk"
    print(cfg.token_ttl_days)    # 7
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from quickask.constants import DEFAULT_AVATAR_URL

# ---------------------------------------------------------------------------
# Typed settings object — infrastructure/identity only.
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class QuickAskConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # API
    api_port: int
    default_avatar_url: str

    # Access gate
    token_ttl_days: int

    # Pagination
    default_page_size: int
    max_page_size: int

    # Optional
    cors_allow_origins: tuple[str, ...] = ()
    reconcile_interval_hours: int = 24


DEFAULT_CONFIG = QuickAskConfig(
    community_name="QuickAsk",
    api_port=8080,
    default_avatar_url=DEFAULT_AVATAR_URL,
    token_ttl_days=7,
    default_page_size=10,
    max_page_size=100,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> QuickAskConfig:
    """Read *path* and return a :class:`QuickAskConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    origins = raw.get("cors_allow_origins") or []
    return QuickAskConfig(
        community_name=raw["community_name"],
        api_port=int(raw["api_port"]),
        default_avatar_url=raw.get(
            "default_avatar_url", DEFAULT_CONFIG.default_avatar_url
        ),
        token_ttl_days=int(raw["token_ttl_days"]),
        default_page_size=int(raw.get("default_page_size", DEFAULT_CONFIG.default_page_size)),
        max_page_size=int(raw.get("max_page_size", DEFAULT_CONFIG.max_page_size)),
        cors_allow_origins=tuple(str(o).rstrip("/") for o in origins),
        reconcile_interval_hours=int(
            raw.get("reconcile_interval_hours", DEFAULT_CONFIG.reconcile_interval_hours)
        ),
    )
