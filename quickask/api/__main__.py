"""
quickask.api.__main__ — Entry point for ``python -m quickask.api``
===================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (port, community name).
3. Hand the app to uvicorn; the lifespan hook creates tables.
"""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from quickask.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("quickask")


def main() -> None:
    """Bootstrap and serve the QuickAsk API."""
    load_dotenv()
    cfg = load_config()
    logger.info("Starting %s on port %d", cfg.community_name, cfg.api_port)
    uvicorn.run("quickask.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
