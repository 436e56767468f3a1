"""Shared fixtures: in-memory database, app, HTTP client and a fake chat model."""

import json
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.agent.llm import ChatModelGenerator
from app.core.config import Settings
from app.core.database import close_db, create_engine, create_session_factory, init_db
from app.main import create_app
from app.models import User


def make_roadmap_reply(topic_counts: tuple[int, ...] = (3, 2), prose: bool = True) -> str:
    """A model reply containing a roadmap with ``topic_counts`` topics per stage."""
    stages = [
        {
            "stageTitle": f"Stage {s + 1}",
            "duration": "2 weeks",
            "topics": [
                {
                    "topicTitle": f"Topic {s + 1}.{t + 1}",
                    "resources": ["https://docs.python.org/3/tutorial/"],
                    "category": "language",
                }
                for t in range(count)
            ],
        }
        for s, count in enumerate(topic_counts)
    ]
    body = json.dumps(
        {
            "title": "Backend Basics",
            "description": "From zero to a working API",
            "totalDuration": "4 weeks",
            "stages": stages,
        },
        indent=2,
    )
    if prose:
        return f"Here is your roadmap:\n```json\n{body}\n```\nGood luck!"
    return body


def fake_generator(*replies: str) -> ChatModelGenerator:
    return ChatModelGenerator(FakeListChatModel(responses=list(replies)))


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ENV="test",
        DATABASE_URL="sqlite+aiosqlite://",
        JWT_SECRET_KEY="test-secret",
        CLIENT_URL="http://client.test/",
        GOOGLE_CLIENT_ID="google-id",
        GOOGLE_CLIENT_SECRET="google-secret",
        GOOGLE_CALLBACK_URL="http://api.test/api/auth/google/callback",
        GITHUB_CLIENT_ID="github-id",
        GITHUB_CLIENT_SECRET="github-secret",
    )


@pytest_asyncio.fixture
async def test_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(test_settings)
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest_asyncio.fixture
async def test_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session = create_session_factory(test_engine)()
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def seed_user(test_session: AsyncSession) -> User:
    user = User(name="Ada", email="ada@example.com", password_hash=None)
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture
async def other_user(test_session: AsyncSession) -> User:
    user = User(name="Grace", email="grace@example.com", password_hash=None)
    test_session.add(user)
    await test_session.commit()
    return user


@pytest_asyncio.fixture
async def test_app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    app = create_app(test_settings)
    await init_db(app.state.engine)
    app.state.text_generator = fake_generator(make_roadmap_reply())
    yield app
    await close_db(app.state.engine)


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(client: AsyncClient) -> Callable:
    """Register a user through the API and return ``(token, user_json)``."""

    async def _register(email: str = "ada@example.com", name: str = "Ada") -> tuple[str, dict]:
        resp = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": "s3cret-pass"},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["token"], body["user"]

    return _register


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
