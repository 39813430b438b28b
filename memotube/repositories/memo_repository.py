"""메모 레포지토리: 메모 관련 DB 쿼리 담당.

Memo Repository: Handles memo database queries.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.memo import Memo
from memotube.models.tag import Tag
from memotube.repositories.base import BaseRepository
from memotube.schemas.common import ListParams
from memotube.utils.pagination import order_clauses, search_clause


class MemoRepository(BaseRepository[Memo]):
    """메모 레포지토리.

    Memo repository with per-user filtering and allow-listed sorting.

    Extends:
        BaseRepository[Memo]
    """

    SORT_COLUMNS: dict[str, Any] = {
        "created_at": Memo.created_at,
        "updated_at": Memo.updated_at,
        "timestamp_seconds": Memo.timestamp_seconds,
    }
    SEARCH_COLUMNS: tuple[Any, ...] = (Memo.content,)

    def __init__(self) -> None:
        super().__init__(Memo)

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        filters: dict[str, Any] | None = None,
    ) -> tuple[Sequence[Memo], int]:
        """사용자 메모를 필터링하여 페이지네이션 조회합니다.

        Retrieve a page of the user's memos.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 UUID (Owner UUID)
            params: 목록 파라미터 (page, limit, sort, order, search)
            filters: 추가 필터 (video_id, is_task, is_important, tags)
                     tags는 하나라도 붙은 메모와 일치 (tags matches memos carrying any of the names)

        Returns:
            tuple[Sequence[Memo], int]: (메모 목록, 전체 개수)
        """
        query: Select = select(Memo).where(Memo.user_id == user_id)

        if filters:
            if filters.get("video_id") is not None:
                query = query.where(Memo.video_id == filters["video_id"])
            if filters.get("is_task") is not None:
                query = query.where(Memo.is_task.is_(filters["is_task"]))
            if filters.get("is_important") is not None:
                query = query.where(Memo.is_important.is_(filters["is_important"]))
            if filters.get("tags"):
                query = query.where(Memo.tags.any(Tag.name.in_(filters["tags"])))
        if params.search:
            query = query.where(search_clause(params.search, self.SEARCH_COLUMNS))

        query = query.order_by(
            *order_clauses(self.SORT_COLUMNS, params.sort, params.order, "created_at", Memo.id)
        )
        return await self.get_paginated(db, query, params.page, params.limit)

    async def list_by_video(
        self,
        db: AsyncSession,
        user_id: UUID,
        video_id: UUID,
    ) -> Sequence[Memo]:
        """동영상의 모든 메모를 재생 시점 순으로 조회합니다.

        All of the user's memos for one video, by timestamp ascending
        (memos without a timestamp last).
        """
        result = await db.execute(
            select(Memo)
            .where(Memo.user_id == user_id, Memo.video_id == video_id)
            .order_by(
                Memo.timestamp_seconds.is_(None),
                Memo.timestamp_seconds.asc(),
                Memo.created_at.asc(),
            )
        )
        return result.scalars().all()


# 싱글턴 인스턴스: Singleton instance (stateless)
memo_repository: MemoRepository = MemoRepository()
