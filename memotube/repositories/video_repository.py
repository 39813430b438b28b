"""동영상 레포지토리: 저장된 동영상 관련 DB 쿼리 담당.

Video Repository: Handles saved-video database queries.
Extends BaseRepository with per-user listing, search and YouTube id lookup.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.video import Video
from memotube.repositories.base import BaseRepository
from memotube.schemas.common import ListParams
from memotube.utils.pagination import order_clauses, search_clause


class VideoRepository(BaseRepository[Video]):
    """동영상 레포지토리.

    Video repository with per-user filtering and allow-listed sorting.

    Extends:
        BaseRepository[Video]
    """

    # 정렬 허용 목록: Allow-listed sort keys
    SORT_COLUMNS: dict[str, Any] = {
        "saved_at": Video.saved_at,
        "published_at": Video.published_at,
        "title": Video.title,
        "last_watched_at": Video.last_watched_at,
    }
    SEARCH_COLUMNS: tuple[Any, ...] = (Video.title, Video.description, Video.channel_name)

    def __init__(self) -> None:
        super().__init__(Video)

    async def get_by_user_and_youtube_id(
        self,
        db: AsyncSession,
        user_id: UUID,
        youtube_id: str,
    ) -> Video | None:
        """사용자가 이미 저장한 YouTube 동영상을 조회합니다.

        Find the user's saved copy of a YouTube video, if any.
        """
        result = await db.execute(
            select(Video).where(Video.user_id == user_id, Video.youtube_id == youtube_id)
        )
        return result.scalar_one_or_none()

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        archived: bool | None = None,
    ) -> tuple[Sequence[Video], int]:
        """사용자 동영상을 필터/검색/정렬하여 페이지네이션 조회합니다.

        Retrieve a page of the user's videos.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 UUID (Owner UUID)
            params: 목록 파라미터 (page, limit, sort, order, search)
            archived: 보관 여부 필터, None이면 전체 (Archived filter, None = all)

        Returns:
            tuple[Sequence[Video], int]: (동영상 목록, 전체 개수)
        """
        query: Select = select(Video).where(Video.user_id == user_id)

        if archived is not None:
            query = query.where(Video.is_archived.is_(archived))
        if params.search:
            query = query.where(search_clause(params.search, self.SEARCH_COLUMNS))

        query = query.order_by(
            *order_clauses(self.SORT_COLUMNS, params.sort, params.order, "saved_at", Video.id)
        )
        return await self.get_paginated(db, query, params.page, params.limit)


# 싱글턴 인스턴스: Singleton instance (stateless)
video_repository: VideoRepository = VideoRepository()
