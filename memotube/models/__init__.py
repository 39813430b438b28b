"""SQLAlchemy ORM 모델 패키지: 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package: Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 (User accounts)
    video: 저장된 동영상 (Saved YouTube videos)
    memo: 메모 (Timestamped memos)
    task: 업무 (Tasks with due dates and priorities)
    tag: 태그 (Memo tags with usage counts)
"""

from memotube.models.user import User
from memotube.models.video import Video
from memotube.models.memo import Memo
from memotube.models.task import Task
from memotube.models.tag import Tag

__all__ = ["User", "Video", "Memo", "Task", "Tag"]
