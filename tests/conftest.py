"""
Pytest configuration and core fixtures.

Every test gets its own stores, limiter and notifier; nothing is shared
between tests. The document store lives in a per-test temporary directory
and the SQL store in a private in-memory SQLite database.
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool


def pytest_configure(config):
    """Configure pytest with custom settings."""
    os.environ["ENVIRONMENT"] = "test"
    os.environ.setdefault("DEBUG", "true")


class FakeClock:
    """Controllable UTC clock for rate limit windows and timestamps."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def document_store(tmp_path, clock):
    """Document store writing into a per-test temporary data directory."""
    from app.apps.website.storage import DocumentSubmissionStore

    store = DocumentSubmissionStore(tmp_path / "data", clock=clock)
    await store.init()
    yield store
    await store.close()


@pytest.fixture
async def sql_store(clock):
    """SQL store on a private in-memory SQLite database."""
    from app.apps.website.storage import SQLSubmissionStore
    from app.core.config import settings

    engine = create_async_engine(
        settings.TEST_DATABASE_URL,
        poolclass=StaticPool,
    )
    store = SQLSubmissionStore(engine=engine, clock=clock)
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def rate_limiter(clock):
    from app.core.services import RateLimiter

    return RateLimiter(backend="memory", clock=clock)


@pytest.fixture
def notifier():
    from app.apps.website.services import SubmissionNotifier

    return SubmissionNotifier(recipient="sales@test.example")


@pytest.fixture
def submission_service(document_store, rate_limiter, notifier):
    from app.apps.website.services import SubmissionService

    return SubmissionService(
        store=document_store,
        rate_limiter=rate_limiter,
        notifier=notifier,
    )


@pytest.fixture
def app():
    """Import and return the FastAPI app."""
    from app.main import app as fastapi_app

    return fastapi_app


@asynccontextmanager
async def serve(app, service) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client backed by the given submission service.

    The lifespan does not run under ASGITransport, so the service is
    injected through a dependency override and app.state (for /health).
    """
    from app.apps.website.dependencies import get_submission_service

    app.dependency_overrides[get_submission_service] = lambda: service
    previous = getattr(app.state, "submission_service", None)
    app.state.submission_service = service

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_submission_service, None)
        app.state.submission_service = previous
        await service.notifier.drain()


@pytest.fixture
async def client(app, submission_service) -> AsyncGenerator[AsyncClient, None]:
    async with serve(app, submission_service) as ac:
        yield ac


@pytest.fixture
async def sql_client(
    app, sql_store, rate_limiter, notifier
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose submissions go to the in-memory SQL store."""
    from app.apps.website.services import SubmissionService

    service = SubmissionService(
        store=sql_store, rate_limiter=rate_limiter, notifier=notifier
    )
    async with serve(app, service) as ac:
        yield ac


@pytest.fixture
def quote_payload() -> dict:
    return {
        "name": "Jane Doe",
        "mobile": "+14155550100",
        "email": "jane@example.com",
        "company": "Acme Ltd",
        "requirements": "Need 500 units of bracket X per month",
    }


@pytest.fixture
def contact_payload() -> dict:
    return {
        "name": "John Smith",
        "email": "John@Example.com",
        "subject": "Partnership",
        "message": "I would like to discuss a distribution partnership.",
    }
