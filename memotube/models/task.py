"""업무 ORM 모델.

Task ORM model: trackable to-dos, optionally created from a memo.

Tables:
    - tasks: 사용자 업무 (User tasks)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memotube.database import Base

# 우선순위 순위: 정렬 시 문자열 순서 대신 사용 (Rank used when sorting by priority)
PRIORITY_RANK: dict[str, int] = {"urgent": 4, "high": 3, "medium": 2, "low": 1}

TASK_PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "urgent")
TASK_STATUSES: tuple[str, ...] = ("pending", "in_progress", "completed", "cancelled")


class Task(Base):
    """업무 모델.

    Task model. ``completed_at`` is stamped when status becomes
    ``completed`` and cleared when it moves to any other status.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 소유자 FK (Owner foreign key)
        memo_id: 원본 메모 FK, 선택 (Source memo, optional)
        video_id: 관련 동영상 FK, 선택 (Related video, optional)
        title: 제목 (Title, max 500 chars)
        description: 설명 (Description, optional)
        priority: low | medium | high | urgent
        status: pending | in_progress | completed | cancelled
        due_date: 마감 일시 (Due date, optional)
        completed_at: 완료 일시 (Completion time)
        created_at / updated_at: 생성/수정 일시 UTC
    """

    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 메모/동영상 삭제 시 업무는 유지하고 연결만 해제 (SET NULL)
    memo_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("memos.id", ondelete="SET NULL"), nullable=True)
    video_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("videos.id", ondelete="SET NULL"), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계: Relationships
    user = relationship("User", back_populates="tasks")
    memo = relationship("Memo")
    video = relationship("Video")
