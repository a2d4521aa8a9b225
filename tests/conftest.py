"""
Pytest configuration and shared fixtures.

Every test runs against a fresh ``InMemoryStore`` and a verifier that
only knows the tokens in ``tests.fakes.TOKENS``.  The admin allowlist is
pinned to ``boss@example.com``.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from camptogether_api.app.core import db, security
from camptogether_api.app.core.config import settings
from camptogether_api.app.main import app
from camptogether_api.app.schemas.event import EventCreate
from camptogether_api.app.services.event_service import EventService

from .fakes import ADMIN_EMAILS, HOST, TOKENS, InMemoryStore, StaticTokenVerifier


@pytest.fixture(autouse=True)
def admin_allowlist(monkeypatch):
    monkeypatch.setattr(settings, "admin_emails", ADMIN_EMAILS)


@pytest.fixture(autouse=True)
def store():
    memory_store = InMemoryStore()
    db.init_store(memory_store)
    yield memory_store
    db.init_store(None)


@pytest.fixture(autouse=True)
def verifier():
    static_verifier = StaticTokenVerifier(TOKENS)
    security.init_verifier(static_verifier)
    yield static_verifier
    security.init_verifier(None)


@pytest.fixture(autouse=True)
def request_budget():
    """Start every test with an empty rate-limit window."""
    app.state.limiter.reset()
    yield app.state.limiter


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def event(store):
    """A private event hosted by ``HOST``."""
    return await EventService.create_event(
        EventCreate(title="Pine Lake Weekend", start_date="2026-02-10", end_date="2026-02-12"),
        HOST,
    )
