"""
quickask.api.main — FastAPI application entry point
====================================================

Run with::

    uvicorn quickask.api.main:app --reload --port 8080

or ``python -m quickask.api`` (reads the port from ``config.yaml``).
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from quickask.api.auth import router as auth_router  # noqa: E402
from quickask.api.deps import get_config, get_engine  # noqa: E402
from quickask.api.responses import error, ok  # noqa: E402
from quickask.api.routes.answers import router as answers_router  # noqa: E402
from quickask.api.routes.favorites import router as favorites_router  # noqa: E402
from quickask.api.routes.questions import router as questions_router  # noqa: E402
from quickask.api.routes.users import router as users_router  # noqa: E402
from quickask.api.tasks import start_reconciliation  # noqa: E402
from quickask.config import load_config  # noqa: E402
from quickask.database.engine import init_db  # noqa: E402
from quickask.errors import QuickAskError  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) ``cors_allow_origins`` in config.yaml, when the file exists
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    if Path("config.yaml").exists():
        return list(load_config().cors_allow_origins)

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — warm the DB engine, run the reconciliation loop."""
    engine = get_engine()
    init_db(engine)
    cfg = get_config()
    logger.info("%s API started — engine ready (%s)", cfg.community_name, engine.url.database)
    reconciliation = start_reconciliation(engine, cfg)
    yield
    if reconciliation is not None:
        reconciliation.cancel()
        try:
            await reconciliation
        except asyncio.CancelledError:
            pass
    logger.info("%s API shutting down", cfg.community_name)


app = FastAPI(
    title="QuickAsk API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(questions_router, prefix="/api")
app.include_router(answers_router, prefix="/api")
app.include_router(favorites_router, prefix="/api")


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------
@app.exception_handler(QuickAskError)
async def _quickask_error(request: Request, exc: QuickAskError):
    return error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return error(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return error(400, f"{field}: {message}" if field else message)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def _unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error(500, "Internal server error")


@app.get("/api/health")
def health():
    return ok({"status": "ok"})
