"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database per test (tables created from the models)
- Test settings, a private hook registry and fake collaborators
- HTTPX AsyncClient wired to the app with dependency overrides
"""
import os
from typing import AsyncGenerator, Generator

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import formflow.db.models  # noqa: F401
from formflow.core.config import Settings
from formflow.core.hooks import HookRegistry
from formflow.db.base import Base

from factories import FakeEmailSender, FakeQueue, make_settings


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine) -> Generator[Session, None, None]:
    """Session on a fresh in-memory database; app code may commit freely."""
    TestingSession = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = TestingSession()
    yield session
    session.close()


# =============================================================================
# Collaborators
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def queue() -> FakeQueue:
    return FakeQueue()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def app_settings() -> Settings:
    """Settings served to the app through the get_settings override."""
    return make_settings()


@pytest.fixture(scope="function")
async def client(
    db: Session,
    hooks: HookRegistry,
    email_sender: FakeEmailSender,
    app_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against the app with DB, settings, hooks and email sender overridden."""
    from formflow.core.deps import get_db, get_email_sender, get_hooks, get_settings
    from formflow.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: app_settings
    app.dependency_overrides[get_hooks] = lambda: hooks
    app.dependency_overrides[get_email_sender] = lambda: email_sender

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
