"""동영상 관련 Pydantic 요청/응답 스키마 정의.

Video request/response schema definitions and the metadata record
returned by the YouTube metadata provider.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from memotube.schemas.common import CamelModel

# 동영상 정렬 허용 목록: Allow-listed video sort keys
VideoSort = Literal["saved_at", "published_at", "title", "last_watched_at"]


class VideoSaveRequest(CamelModel):
    """동영상 저장 요청 스키마.

    Attributes:
        youtube_url: YouTube URL (watch, youtu.be, embed, shorts)
    """

    youtube_url: str = Field(min_length=1, max_length=2048)


class VideoUpdateRequest(CamelModel):
    """동영상 수정 요청 스키마 (부분 업데이트)."""

    is_archived: bool | None = None


class VideoMetadata(BaseModel):
    """YouTube 메타데이터 (Metadata returned by the video provider).

    Attributes:
        youtube_id: YouTube 동영상 ID (11-char id)
        title: 제목 (Title)
        description: 설명 (Description)
        channel_id: 채널 ID (Channel id)
        channel_name: 채널 이름 (Channel title)
        thumbnail_url: 썸네일 URL (Best available thumbnail)
        duration: 재생 시간(초) (Duration in seconds)
        published_at: 게시 일시 (Publish time)
        view_count: 조회수 (View count)
        like_count: 좋아요 수, 비공개면 None (Like count, None when hidden)
        tags: 태그 목록 (Tags)
    """

    youtube_id: str
    title: str
    description: str = ""
    channel_id: str | None = None
    channel_name: str | None = None
    thumbnail_url: str | None = None
    duration: int = 0
    published_at: datetime | None = None
    view_count: int = 0
    like_count: int | None = None
    tags: list[str] = []


class VideoResponse(BaseModel):
    """동영상 응답 스키마 (Video payload returned to clients)."""

    id: UUID
    user_id: UUID
    youtube_id: str
    title: str
    description: str | None
    channel_name: str | None
    channel_id: str | None
    thumbnail_url: str | None
    duration: int | None
    published_at: datetime | None
    saved_at: datetime
    last_watched_at: datetime | None
    watch_count: int
    is_archived: bool
    metadata: dict[str, Any]
