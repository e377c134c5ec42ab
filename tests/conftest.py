"""
Pytest configuration and fixtures for authenticator tests.

Provides fixtures for:
- Database and host context
- Recorded host events
- Test settings and HTTP client
"""

from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from character_authentication.authenticators import AUTHENTICATOR_TYPES, LocalAuthenticator
from character_authentication.character import Character
from character_authentication.config.settings import Settings
from character_authentication.database import Database
from character_authentication.main import create_app
from tests.helpers import SESSION_COOKIE, SESSION_SECRET, StubAuthenticator


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests with mocked dependencies")
    config.addinivalue_line("markers", "integration: tests against a real SQLite database")


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fixed redirects and the stub + local authenticators"""
    return Settings(
        _env_file=None,
        session_secret_key=SESSION_SECRET,
        session_cookie=SESSION_COOKIE,
        success_redirect="/welcome",
        deferred_redirect="/check-your-email",
        failure_redirect="/login",
        onboard_known_accounts=True,
        authenticators=["stub", "local"],
        authenticator_options={},
    )


@pytest.fixture(autouse=True)
def stub_authenticator_type(monkeypatch):
    """Make the stub authenticator available to the factory."""
    monkeypatch.setitem(AUTHENTICATOR_TYPES, "stub", StubAuthenticator)


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Create a file-backed SQLite database with core and local tables."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test_db.sqlite'}", pooled=False)
    db.register_authenticator_models("local", LocalAuthenticator.models())
    await db.init_db()

    yield db

    await db.drop_db()
    await db.close()


@pytest.fixture
def events() -> List[tuple]:
    """Collects (event, payload) tuples emitted on the host."""
    return []


@pytest.fixture
def character(database: Database, events: List[tuple]) -> Character:
    """Host context recording every authentication event."""
    host = Character(database)
    for event in ("authentication:authenticate", "authentication:onboard"):
        host.on(event, lambda payload, event=event: events.append((event, payload)))
    return host


@pytest.fixture
def app(test_settings: Settings, character: Character):
    """Application with the stub and local authenticators mounted."""
    return create_app(test_settings, character)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client (redirects are not followed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
