"""동영상 서비스: 저장된 YouTube 동영상 비즈니스 로직.

Video Service: Business logic for saved YouTube videos.
Handles saving by URL (metadata lookup through YouTubeService), listing,
search, archive toggling, deletion and watch tracking.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.video import Video
from memotube.repositories.tag_repository import tag_repository
from memotube.repositories.video_repository import video_repository
from memotube.schemas.common import ListParams, PaginatedResult
from memotube.schemas.video import VideoMetadata, VideoResponse, VideoUpdateRequest
from memotube.services.youtube_service import YouTubeService
from memotube.utils.exceptions import NotFoundError, ValidationFailedError
from memotube.utils.pagination import build_page
from memotube.utils.youtube import extract_video_id


def _invalid_url(field: str) -> ValidationFailedError:
    return ValidationFailedError(
        "Invalid YouTube URL",
        details=[{"field": field, "message": "Must be a YouTube watch, youtu.be, embed or shorts URL"}],
    )


class VideoService:
    """동영상 서비스.

    Video service. Every read and mutation is scoped to the requesting
    user; another user's video is reported as not found.

    Attributes:
        youtube: 메타데이터 제공자 (Metadata provider)
    """

    def __init__(self, youtube: YouTubeService) -> None:
        self.youtube: YouTubeService = youtube

    def to_response(self, video: Video) -> VideoResponse:
        """동영상 모델을 응답 스키마로 변환합니다.

        Build the response payload; the ORM attribute ``video_metadata``
        is exposed as ``metadata``.
        """
        return VideoResponse(
            id=video.id,
            user_id=video.user_id,
            youtube_id=video.youtube_id,
            title=video.title,
            description=video.description,
            channel_name=video.channel_name,
            channel_id=video.channel_id,
            thumbnail_url=video.thumbnail_url,
            duration=video.duration,
            published_at=video.published_at,
            saved_at=video.saved_at,
            last_watched_at=video.last_watched_at,
            watch_count=video.watch_count,
            is_archived=video.is_archived,
            metadata=video.video_metadata or {},
        )

    async def _get_owned_or_404(self, db: AsyncSession, video_id: UUID, user_id: UUID) -> Video:
        video: Video | None = await video_repository.get_owned(db, video_id, user_id)
        if video is None:
            raise NotFoundError("Video not found")
        return video

    async def save_video(
        self,
        db: AsyncSession,
        user_id: UUID,
        youtube_url: str,
    ) -> VideoResponse:
        """YouTube URL로 동영상을 저장합니다.

        Save a video by URL. If the user already saved this YouTube video,
        the existing record is returned unchanged.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 요청자 UUID (Requesting user UUID)
            youtube_url: YouTube URL

        Returns:
            VideoResponse: 저장된(또는 기존) 동영상 (Saved or existing video)

        Raises:
            ValidationFailedError: 인식할 수 없는 URL (Unrecognized URL)
            NotFoundError: YouTube에 없는 동영상 (Video does not exist on YouTube)
        """
        youtube_id: str | None = extract_video_id(youtube_url)
        if youtube_id is None:
            raise _invalid_url("youtubeUrl")

        existing: Video | None = await video_repository.get_by_user_and_youtube_id(
            db, user_id, youtube_id
        )
        if existing is not None:
            return self.to_response(existing)

        metadata: VideoMetadata = await self.youtube.get_video_metadata(youtube_id)
        video: Video = await video_repository.create(db, {
            "user_id": user_id,
            "youtube_id": metadata.youtube_id,
            "title": metadata.title,
            "description": metadata.description,
            "channel_name": metadata.channel_name,
            "channel_id": metadata.channel_id,
            "thumbnail_url": metadata.thumbnail_url,
            "duration": metadata.duration,
            "published_at": metadata.published_at,
            "video_metadata": {
                "view_count": metadata.view_count,
                "like_count": metadata.like_count,
                "tags": metadata.tags,
            },
        })
        return self.to_response(video)

    async def preview(self, youtube_url: str) -> VideoMetadata:
        """저장하지 않고 메타데이터만 조회합니다. (Metadata without saving.)"""
        youtube_id: str | None = extract_video_id(youtube_url)
        if youtube_id is None:
            raise _invalid_url("url")
        return await self.youtube.get_video_metadata(youtube_id)

    async def list_videos(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        archived: bool | None = None,
    ) -> PaginatedResult:
        """사용자 동영상 목록을 조회합니다. (List the user's videos.)"""
        videos, total = await video_repository.list_by_user(db, user_id, params, archived)
        return build_page([self.to_response(v) for v in videos], params, total)

    async def get_video(
        self,
        db: AsyncSession,
        video_id: UUID,
        user_id: UUID,
    ) -> VideoResponse:
        """동영상 상세를 조회합니다.

        Raises:
            NotFoundError: 없거나 다른 사용자의 동영상 (Missing or not owned)
        """
        return self.to_response(await self._get_owned_or_404(db, video_id, user_id))

    async def update_video(
        self,
        db: AsyncSession,
        video_id: UUID,
        user_id: UUID,
        data: VideoUpdateRequest,
    ) -> VideoResponse:
        """동영상 보관 상태를 수정합니다. (Update the archive flag.)"""
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        video: Video | None = await video_repository.update_owned(db, video_id, user_id, update_data)
        if video is None:
            raise NotFoundError("Video not found")
        return self.to_response(video)

    async def delete_video(
        self,
        db: AsyncSession,
        video_id: UUID,
        user_id: UUID,
    ) -> None:
        """동영상을 삭제합니다. 메모는 함께 삭제, 업무의 연결은 해제.

        Delete a video; its memos go with it, tasks keep existing unlinked.
        Tag counts drop by the deleted memos and unused tags are removed.
        """
        await tag_repository.release_video(db, user_id, video_id)
        if not await video_repository.delete_owned(db, video_id, user_id):
            raise NotFoundError("Video not found")
        await tag_repository.delete_unused(db, user_id)

    async def mark_watched(
        self,
        db: AsyncSession,
        video_id: UUID,
        user_id: UUID,
    ) -> VideoResponse:
        """시청 기록: watch_count 증가, last_watched_at 갱신.

        Record a viewing. The increment runs inside the UPDATE statement.
        """
        video: Video | None = await video_repository.update_owned(db, video_id, user_id, {
            "watch_count": Video.watch_count + 1,
            "last_watched_at": datetime.now(timezone.utc),
        })
        if video is None:
            raise NotFoundError("Video not found")
        return self.to_response(video)
