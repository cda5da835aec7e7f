"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from wortschatz.config import settings
from wortschatz.database import Base, get_session
from wortschatz.main import app


class FakeOracle:
    """Stands in for the OpenAI client; records what was sent."""

    def __init__(self) -> None:
        self.create = AsyncMock()
        self.client = MagicMock()
        self.client.chat.completions.create = self.create

    @staticmethod
    def completion(content: str | None, model: str = "gpt-4o-test") -> MagicMock:
        message = MagicMock()
        message.content = content
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        response.model = model
        return response

    def reply(self, payload: Any, model: str = "gpt-4o-test") -> None:
        """Answer every call with this payload (dicts are JSON-encoded)."""
        content = payload if payload is None or isinstance(payload, str) else json.dumps(payload)
        self.create.return_value = self.completion(content, model)
        self.create.side_effect = None

    def fail(self, error: Exception) -> None:
        self.create.side_effect = error

    @property
    def call_count(self) -> int:
        return self.create.call_count

    def last_kwargs(self) -> dict[str, Any]:
        return self.create.call_args.kwargs

    def system_prompt(self) -> str:
        return self.last_kwargs()["messages"][0]["content"]

    def user_content(self) -> str:
        return self.last_kwargs()["messages"][1]["content"]

    def user_payload(self) -> dict[str, Any]:
        return json.loads(self.user_content())


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without oracle credential or admin password."""
    monkeypatch.setattr(settings, "openai_api_key", "")
    monkeypatch.setattr(settings, "admin_password", "")
    monkeypatch.setattr("wortschatz.services.llm._client", None)


@pytest.fixture
def oracle(monkeypatch: pytest.MonkeyPatch) -> FakeOracle:
    """Configure a fake oracle and route all LLM calls to it."""
    fake = FakeOracle()
    monkeypatch.setattr(settings, "openai_api_key", "test-key")
    monkeypatch.setattr("wortschatz.services.llm.get_client", lambda: fake.client)
    return fake


@pytest.fixture
def admin_password(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(settings, "admin_password", "geheim")
    return "geheim"


@pytest.fixture
async def async_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def test_app(async_session: AsyncSession) -> FastAPI:
    """Create a test FastAPI application."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        yield async_session

    app.dependency_overrides[get_session] = override_get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an asynchronous test client without a session cookie."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
async def authed_client(
    test_app: FastAPI, admin_password: str
) -> AsyncGenerator[AsyncClient, None]:
    """Create an asynchronous test client carrying the login cookie."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
        cookies={settings.auth_cookie_name: "1"},
    ) as client:
        yield client


@pytest.fixture
def sample_entry_data() -> dict[str, Any]:
    """Sample entry payload for testing."""
    return {
        "term": "Tisch",
        "definition": "Möbelstück mit einer waagerechten Platte",
        "example": "Das Essen steht auf dem Tisch.",
        "synonyms": "Tafel",
        "partOfSpeech": ["noun"],
        "article": "der",
    }


@pytest.fixture
def alternatives_reply() -> dict[str, Any]:
    """Oracle reply with exactly one alternative per situation."""
    return {
        "item": "Feierabendbier",
        "results": {
            "arbeit": ["Mein wohlverdientes Nach-Meeting-Getränk"],
            "schwiegereltern": ["Ein kleines Bierchen zum Tagesausklang"],
            "philosophie_3uhr": ["Der goldene Übergang vom Müssen zum Sein"],
            "gasse_betrunken": ["Endlich Hopfenkaltschale, Alter"],
            "behoerdlich": ["Alkoholhaltiges Getränk nach Dienstschluss"],
        },
    }
