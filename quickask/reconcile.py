"""
quickask.reconcile — Entry point for ``python -m quickask.reconcile``
======================================================================

One-off like-counter reconciliation against ``DATABASE_URL``, for operators
who want a pass outside the API's scheduled loop.  Exits 0 whether or not
corrections were made.
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from quickask.database.engine import create_db_engine
from quickask.services.reconciliation_service import reconcile_likes

logger = logging.getLogger("quickask")


def main() -> dict:
    """Load .env, reconcile every answer, and return the summary."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    load_dotenv()
    engine = create_db_engine()
    try:
        result = reconcile_likes(engine)
    finally:
        engine.dispose()
    logger.info(
        "Reconciliation finished: %d checked, %d corrected",
        result["checked"], result["corrected"],
    )
    return result


if __name__ == "__main__":
    main()
