"""
quickask.api.tasks — Periodic Background Tasks
===============================================

- **Like reconciliation** — every ``reconcile_interval_hours`` (default 24),
  repairs ``answers.likes`` drift against the reaction rows.

The loop runs inside the API process and is started and cancelled by the
app lifespan.  Database work goes through ``run_db()`` so the event loop is
never blocked.
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import Engine

from quickask.config import QuickAskConfig
from quickask.database.engine import run_db
from quickask.services.reconciliation_service import reconcile_likes

logger = logging.getLogger(__name__)


async def run_reconciliation_once(engine: Engine) -> dict | None:
    """Run one reconciliation pass; a failure is logged and the loop carries on."""
    try:
        return await run_db(reconcile_likes, engine)
    except Exception:
        logger.exception("Like reconciliation failed", extra={"task": "reconciliation"})
        return None


async def reconciliation_loop(engine: Engine, interval_seconds: float) -> None:
    """Reconcile now, then every *interval_seconds* until cancelled."""
    while True:
        await run_reconciliation_once(engine)
        await asyncio.sleep(interval_seconds)


def start_reconciliation(engine: Engine, cfg: QuickAskConfig) -> asyncio.Task | None:
    """Schedule :func:`reconciliation_loop` on the running loop.

    Returns ``None`` when ``reconcile_interval_hours`` is 0 (disabled).
    """
    if cfg.reconcile_interval_hours <= 0:
        logger.info("Like reconciliation loop disabled")
        return None
    logger.info("Like reconciliation every %d h", cfg.reconcile_interval_hours)
    return asyncio.create_task(
        reconciliation_loop(engine, cfg.reconcile_interval_hours * 3600),
        name="like-reconciliation",
    )
