"""테스트 인프라: 인메모리 SQLite 앱, httpx 클라이언트, 사용자 픽스처.

Test infrastructure: An isolated application per test on in-memory SQLite
(aiosqlite), an httpx client over ASGITransport, and registered users with
their tokens. Every test gets its own engine, secrets and services.
"""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.config import Settings
from memotube.context import AppContext
from memotube.database import Base
from memotube.main import create_app

DEFAULT_PASSWORD = "Passw0rd!"


def make_settings(**overrides: Any) -> Settings:
    """테스트용 설정: 빠른 bcrypt, 고유 비밀키, 오프라인 YouTube."""
    values: dict[str, Any] = {
        "DATABASE_URL": "sqlite+aiosqlite://",
        "JWT_ACCESS_SECRET": "test-access-secret-0123456789abcdef0123456789",
        "JWT_REFRESH_SECRET": "test-refresh-secret-abcdef0123456789abcdef0123",
        "BCRYPT_ROUNDS": 4,
        "YOUTUBE_API_KEY": "",
        "AXIOM_API_TOKEN": "",
        "AXIOM_DATASET": "",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


async def build_test_app(
    settings: Settings,
    youtube_transport: httpx.AsyncBaseTransport | None = None,
    axiom_client: Any | None = None,
) -> FastAPI:
    """테이블이 생성된 격리된 앱을 만듭니다. (Isolated app with tables created.)"""
    application = create_app(settings, youtube_transport=youtube_transport, axiom_client=axiom_client)
    async with application.state.context.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return application


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """테스트마다 새로 만드는 앱 (Fresh application per test)."""
    application = await build_test_app(settings)
    yield application
    await application.state.context.dispose()


@pytest.fixture
def context(app: FastAPI) -> AppContext:
    return app.state.context


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 (httpx over ASGITransport)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db(context: AppContext) -> AsyncGenerator[AsyncSession, None]:
    """앱과 같은 DB에 연결된 세션 (Session on the app's database)."""
    async with context.session_factory() as session:
        yield session


# ---------------------------------------------------------------------------
# 헬퍼: 회원가입으로 사용자 생성
# ---------------------------------------------------------------------------
async def register_user(
    client: AsyncClient,
    username: str,
    email: str | None = None,
    password: str = DEFAULT_PASSWORD,
) -> dict[str, Any]:
    """API로 회원가입하고 {user, tokens, token}을 반환합니다."""
    res = await client.post("/api/auth/register", json={
        "email": email or f"{username}@example.com",
        "username": username,
        "password": password,
        "displayName": username.title(),
    })
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    return {
        "user": data["user"],
        "tokens": data["tokens"],
        "token": data["tokens"]["accessToken"],
        "password": password,
    }


@pytest_asyncio.fixture
async def alice(client: AsyncClient) -> dict[str, Any]:
    """첫 번째 테스트 사용자."""
    return await register_user(client, "alice")


@pytest_asyncio.fixture
async def bob(client: AsyncClient) -> dict[str, Any]:
    """두 번째 테스트 사용자 (소유권 격리 검증용)."""
    return await register_user(client, "bob")


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# 헬퍼: 리소스 생성
# ---------------------------------------------------------------------------
async def save_video(client: AsyncClient, token: str, youtube_id: str = "dQw4w9WgXcQ") -> dict[str, Any]:
    res = await client.post(
        "/api/videos",
        json={"youtubeUrl": f"https://www.youtube.com/watch?v={youtube_id}"},
        headers=auth_header(token),
    )
    assert res.status_code == 201, res.text
    return res.json()["data"]["video"]


async def create_memo(client: AsyncClient, token: str, **fields: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"content": "A memo"}
    body.update(fields)
    res = await client.post("/api/memos", json=body, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()["data"]["memo"]


async def create_task(client: AsyncClient, token: str, **fields: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"title": "A task"}
    body.update(fields)
    res = await client.post("/api/tasks", json=body, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()["data"]["task"]
