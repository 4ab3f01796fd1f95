"""Shared pytest fixtures for the Lingua Chat test suite.

Provides:
  - mock_llm: Mock LLMProvider returning a configurable reply and recording calls
  - db_engine / db_session: async SQLite in-memory database with all tables
  - client / other_client: httpx clients authenticated as two different users,
    talking to the FastAPI app bound to the in-memory database with the LLM
    provider overridden
  - create_session_token: signs session cookies as the identity provider would

All external service calls are mocked in every test — no real SDK usage.
"""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest
import pytest_asyncio
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.exceptions import ModelInvocationError
from app.core.security import AuthenticatedUser
from app.db.postgres import build_engine, create_tables
from app.services.llm.base import LLMProvider, LLMResponse

SPANISH_REPLY: dict[str, str] = {
    "userTarget": "Hola",
    "aiTarget": "¡Hola! ¿Qué tal?",
    "aiNative": "Hi! How's it going?",
}


# ---------------------------------------------------------------------------
# Mock LLM Provider
# ---------------------------------------------------------------------------


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing. Returns configurable responses."""

    def __init__(self, generate_text: str | None = None) -> None:
        self._generate_text = (
            generate_text if generate_text is not None else json.dumps(SPANISH_REPLY)
        )
        self._error: Exception | None = None
        self.generate_calls: list[dict[str, Any]] = []

    def set_reply(self, reply: dict[str, Any] | str) -> None:
        self._generate_text = reply if isinstance(reply, str) else json.dumps(reply)

    def fail_with(self, error: Exception) -> None:
        self._error = error

    async def generate(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> LLMResponse:
        self.generate_calls.append(
            {
                "prompt": prompt,
                "system_prompt": system_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "json_mode": json_mode,
            }
        )
        if self._error is not None:
            raise self._error
        return LLMResponse(
            text=self._generate_text,
            input_tokens=50,
            output_tokens=10,
        )


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Deterministic auth and persona settings for every test."""
    monkeypatch.setattr(settings, "jwt_secret_key", "test-secret-key")
    monkeypatch.setattr(settings, "jwt_algorithm", "HS256")
    monkeypatch.setattr(settings, "session_cookie_name", "session")
    monkeypatch.setattr(settings, "tutor_persona", "tutor")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm() -> MockLLMProvider:
    """Mock LLM provider fixture."""
    return MockLLMProvider()


@pytest.fixture
def failing_llm() -> MockLLMProvider:
    """Mock LLM provider whose every call fails like a provider outage."""
    llm = MockLLMProvider()
    llm.fail_with(ModelInvocationError())
    return llm


@pytest.fixture
def alice() -> AuthenticatedUser:
    return AuthenticatedUser(user_id="user-alice")


@pytest.fixture
def bob() -> AuthenticatedUser:
    return AuthenticatedUser(user_id="user-bob")


# ---------------------------------------------------------------------------
# Async SQLite in-memory database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared across connections via StaticPool."""
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session_factory(
    db_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    db_session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with db_session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------


def create_session_token(
    user_id: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Sign a session token the way the identity provider does."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims: dict[str, Any] = {"sub": user_id, "exp": expire}
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def session_cookie_for(user: AuthenticatedUser) -> dict[str, str]:
    return {settings.session_cookie_name: create_session_token(user.user_id)}


@pytest_asyncio.fixture
async def test_app(
    db_session_factory: async_sessionmaker[AsyncSession],
    mock_llm: MockLLMProvider,
    monkeypatch: pytest.MonkeyPatch,
) -> AsyncGenerator[Any, None]:
    """The FastAPI app bound to the in-memory database, LLM provider overridden.

    The real get_async_session runs, so commit, rollback and error wrapping
    are exercised against SQLite.
    """
    import app.db.postgres as postgres
    from app.api.deps import get_llm_provider
    from app.main import app

    monkeypatch.setattr(postgres, "async_session_factory", db_session_factory)
    app.dependency_overrides[get_llm_provider] = lambda: mock_llm
    yield app
    app.dependency_overrides.clear()


def _client_for(app: Any, user: AuthenticatedUser | None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
        cookies=session_cookie_for(user) if user is not None else None,
    )


@pytest_asyncio.fixture
async def client(
    test_app: Any, alice: AuthenticatedUser
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client authenticated as alice."""
    async with _client_for(test_app, alice) as c:
        yield c


@pytest_asyncio.fixture
async def other_client(
    test_app: Any, bob: AuthenticatedUser
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client authenticated as bob."""
    async with _client_for(test_app, bob) as c:
        yield c


@pytest_asyncio.fixture
async def anonymous_client(test_app: Any) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Client with no session cookie."""
    async with _client_for(test_app, None) as c:
        yield c
