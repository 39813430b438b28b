"""저장된 YouTube 동영상 ORM 모델.

Saved YouTube video ORM model.

Tables:
    - videos: 사용자별 저장 동영상 (Videos saved by a user)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memotube.database import Base


class Video(Base):
    """동영상 모델: 사용자가 저장한 YouTube 동영상.

    Video model: A YouTube video saved by one user. The same YouTube id may
    be saved by many users but only once per user.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 소유자 FK (Owner foreign key)
        youtube_id: YouTube 동영상 ID, 11자 (11-char YouTube video id)
        title / description / channel_name / channel_id / thumbnail_url:
            YouTube 메타데이터 (Metadata copied from YouTube)
        duration: 재생 시간(초) (Duration in seconds)
        published_at: YouTube 게시 일시 (YouTube publish time)
        saved_at: 저장 일시 (When the user saved it)
        last_watched_at: 마지막 시청 일시 (Last watch time)
        watch_count: 시청 횟수 (Watch counter)
        is_archived: 보관 여부 (Archived flag)
        video_metadata: 조회수/좋아요/태그 (view_count, like_count, tags): "metadata" column

    Constraints:
        uq_video_user_youtube: 사용자별 YouTube ID 고유 (Unique youtube_id per user)
    """

    __tablename__ = "videos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소유자 FK: Owner (CASCADE: 사용자 삭제 시 동영상도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    youtube_id: Mapped[str] = mapped_column(String(11), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    channel_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    channel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    thumbnail_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    last_watched_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    watch_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # "metadata"는 DeclarativeBase 예약어이므로 속성명을 분리 (attribute name differs from column)
    video_metadata: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("user_id", "youtube_id", name="uq_video_user_youtube"),
    )

    # 관계: Relationships
    user = relationship("User", back_populates="videos")
    memos = relationship("Memo", back_populates="video", cascade="all, delete-orphan", passive_deletes=True)
