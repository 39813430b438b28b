"""초기 데이터 시드 스크립트: 데모 사용자와 예제 동영상/메모/업무 생성.

Seed script: Creates a demo user with a sample video, memo and task.

Usage:
    python -m memotube.seed

Creates:
    - 1개 데모 계정: demo@memotube.app / Demo1234! (1 demo user)
    - 1개 동영상 (오프라인 메타데이터) (1 video, offline metadata)
    - 1개 메모 + 그 메모로 만든 1개 업무 (1 memo and 1 task created from it)
    - 메모에 붙은 1개 태그 (1 tag on the memo)
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncEngine

from memotube.config import Settings
from memotube.database import Base, build_engine, build_session_factory
from memotube.models import Memo, Tag, Task, User, Video
from memotube.repositories.user_repository import user_repository
from memotube.utils.password import hash_password
from memotube.utils.youtube import thumbnail_url

logger = logging.getLogger(__name__)

DEMO_EMAIL: str = "demo@memotube.app"
DEMO_USERNAME: str = "demo"
DEMO_PASSWORD: str = "Demo1234!"
DEMO_YOUTUBE_ID: str = "dQw4w9WgXcQ"


async def seed(settings: Settings | None = None, engine: AsyncEngine | None = None) -> bool:
    """데이터베이스를 데모 데이터로 시드합니다.

    Seed the database with demo data. Creates tables if they don't exist.

    Idempotent: 데모 사용자가 이미 있으면 건너뜁니다 (Skips if the demo user exists).

    Args:
        settings: 애플리케이션 설정 (Settings; loaded from the environment when None)
        engine: 사용할 엔진, None이면 설정으로 생성 후 정리
                (Engine to use; built from settings and disposed when None)

    Returns:
        bool: 데이터를 생성했으면 True (True when demo data was created)
    """
    settings = settings or Settings()
    owns_engine: bool = engine is None
    engine = engine or build_engine(settings)

    try:
        # 테이블 생성: Create all tables from ORM metadata
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with build_session_factory(engine)() as db:
            if await user_repository.get_by_email(db, DEMO_EMAIL) is not None:
                logger.info("Already seeded. Skipping.")
                return False

            user: User = User(
                email=DEMO_EMAIL,
                username=DEMO_USERNAME,
                password_hash=hash_password(DEMO_PASSWORD, settings.BCRYPT_ROUNDS),
                display_name="Demo User",
            )
            db.add(user)
            await db.flush()  # flush로 user.id 생성 (Flush to generate user.id)

            video: Video = Video(
                user_id=user.id,
                youtube_id=DEMO_YOUTUBE_ID,
                title="Demo video",
                description="Sample video created by the seed script",
                thumbnail_url=thumbnail_url(DEMO_YOUTUBE_ID),
                duration=213,
                video_metadata={"view_count": 0, "like_count": None, "tags": ["demo"]},
            )
            db.add(video)
            await db.flush()

            memo: Memo = Memo(
                user_id=user.id,
                video_id=video.id,
                content="Review the chorus section and take notes",
                timestamp_seconds=43,
                is_task=True,
                is_important=True,
                tags=[Tag(user_id=user.id, name="chorus", usage_count=1)],
            )
            db.add(memo)
            await db.flush()

            db.add(Task(
                user_id=user.id,
                memo_id=memo.id,
                video_id=video.id,
                title=memo.content,
                description=memo.content,
                priority="high",
                due_date=datetime.now(timezone.utc) + timedelta(days=3),
            ))
            await db.commit()
            logger.info("Seed completed. Demo login: %s / %s", DEMO_EMAIL, DEMO_PASSWORD)
            return True
    finally:
        if owns_engine:
            await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(seed())
