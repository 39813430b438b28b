"""메모 ORM 모델.

Memo ORM model: timestamped notes, optionally attached to a video.

Tables:
    - memos: 사용자 메모 (User memos)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memotube.database import Base
from memotube.models.tag import Tag, memo_tags


class Memo(Base):
    """메모 모델: 동영상의 특정 시점에 남긴 메모.

    Memo model: A note, optionally pinned to a moment of a saved video.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 소유자 FK (Owner foreign key)
        video_id: 동영상 FK, 선택 (Optional video foreign key)
        content: 메모 내용 (Memo text)
        timestamp_seconds: 동영상 내 시점(초) (Position in the video, seconds)
        is_task: 업무로 전환 여부 (Converted-to-task flag)
        is_important: 중요 표시 (Important flag)
        tags: 태그 목록, 이름순 (Tags, by name)
        created_at / updated_at: 생성/수정 일시 UTC
    """

    __tablename__ = "memos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 동영상 FK: 동영상 삭제 시 메모도 삭제 (CASCADE)
    video_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("videos.id", ondelete="CASCADE"), nullable=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_task: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_important: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계: Relationships
    user = relationship("User", back_populates="memos")
    video = relationship("Video", back_populates="memos")
    # 태그: 메모와 함께 selectin 로드 (Loaded with the memo)
    tags: Mapped[list[Tag]] = relationship(secondary=memo_tags, lazy="selectin", order_by=Tag.name)
