"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Builds the async SQLAlchemy engine and session factory from Settings
and defines the ORM base class. Nothing here is a module-level engine:
each application instance owns its own engine (see ``memotube.context``).
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from memotube.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """설정으로부터 비동기 엔진을 생성합니다.

    Create the async engine for the configured database URL.
    SQLite (tests, local dev) shares one connection through StaticPool so
    an in-memory database survives across sessions.

    Args:
        settings: 애플리케이션 설정 (Application settings)

    Returns:
        AsyncEngine: 비동기 데이터베이스 엔진 (Async database engine)
    """
    if settings.DATABASE_URL.startswith("sqlite"):
        engine: AsyncEngine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

        # SQLite는 FK 제약(ON DELETE)을 기본으로 끔: enable per connection
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    # pool_pre_ping=True: 커넥션 풀에서 꺼낸 연결의 유효성을 사전 확인 (Validates connections before use)
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """세션 팩토리를 생성합니다.

    expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능
    (Allows attribute access after commit without refresh)
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session from the
    session factory of the application serving the request.
    Uncommitted work is rolled back when the request fails.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.context.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
