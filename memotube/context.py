"""애플리케이션 컨텍스트: 요청 간 공유되는 구성 요소 묶음.

Application context: the engine, session factory, token service, YouTube
provider and domain services built once per application from explicit
Settings and stored on ``app.state.context``. Each ``create_app`` call gets
its own context, so separate apps (e.g. one per test) never share state.
"""

from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from memotube.config import Settings
from memotube.database import build_engine, build_session_factory
from memotube.services.auth_service import AuthService
from memotube.services.memo_service import MemoService
from memotube.services.task_service import TaskService
from memotube.services.video_service import VideoService
from memotube.services.youtube_service import YouTubeService
from memotube.utils.jwt import TokenService


@dataclass
class AppContext:
    """앱 단위 의존성 컨테이너 (Per-application dependency container)."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    tokens: TokenService
    youtube: YouTubeService
    auth_service: AuthService
    video_service: VideoService
    memo_service: MemoService
    task_service: TaskService

    async def dispose(self) -> None:
        """DB 커넥션 풀을 정리합니다. (Dispose the connection pool.)"""
        await self.engine.dispose()


def build_context(
    settings: Settings,
    youtube_transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    """설정으로부터 컨텍스트를 구성합니다.

    Build a context from settings. ``youtube_transport`` replaces the
    network transport of the YouTube client (tests pass an
    ``httpx.MockTransport``).
    """
    engine: AsyncEngine = build_engine(settings)
    tokens: TokenService = TokenService(settings)
    youtube: YouTubeService = YouTubeService(settings, transport=youtube_transport)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        tokens=tokens,
        youtube=youtube,
        auth_service=AuthService(settings, tokens),
        video_service=VideoService(youtube),
        memo_service=MemoService(),
        task_service=TaskService(),
    )
