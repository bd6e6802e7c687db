"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from sqlalchemy import text

from formflow.core.config import settings
from formflow.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(
    title="formflow API",
    description="Form submission processing: spam checks, notifications, integrations and retention",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
)

# ============================================================================
# Routers
# ============================================================================

from formflow.routers import admin, internal, stencils, submissions  # noqa: E402

app.include_router(submissions.router)
app.include_router(stencils.router)
app.include_router(admin.router)

# Internal scheduled endpoints (cron)
app.include_router(internal.router)


@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
