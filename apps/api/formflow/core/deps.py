"""FastAPI dependencies."""

import hmac
from typing import Generator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from formflow.core.config import Settings, settings
from formflow.core.hooks import HookRegistry, hooks
from formflow.db.session import SessionLocal
from formflow.services.email_sender import EmailSender, ResendEmailSender


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings() -> Settings:
    return settings


def get_hooks() -> HookRegistry:
    return hooks


def get_email_sender(app_settings: Settings = Depends(get_settings)) -> EmailSender:
    return ResendEmailSender.from_settings(app_settings)


def verify_internal_secret(
    x_internal_secret: str = Header(...),
    app_settings: Settings = Depends(get_settings),
) -> None:
    """Verify the internal secret header."""
    expected = app_settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if not hmac.compare_digest(x_internal_secret.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Invalid internal secret")


def get_client_ip(request: Request, app_settings: Settings) -> str | None:
    """
    Extract client IP from request.

    Only trusts X-Forwarded-For when TRUST_PROXY_HEADERS=True (behind reverse proxy).
    """
    if app_settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # X-Forwarded-For: client, proxy1, proxy2 - take first
            return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host
    return None
