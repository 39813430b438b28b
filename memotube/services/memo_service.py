"""메모 서비스: 메모 비즈니스 로직.

Memo Service: Business logic for memos attached to saved videos.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import not_
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.memo import Memo
from memotube.models.tag import Tag
from memotube.repositories.memo_repository import memo_repository
from memotube.repositories.tag_repository import tag_repository
from memotube.repositories.video_repository import video_repository
from memotube.schemas.common import ListParams, PaginatedResult
from memotube.schemas.memo import MemoCreateRequest, MemoResponse, MemoUpdateRequest, TagResponse
from memotube.utils.exceptions import NotFoundError
from memotube.utils.pagination import build_page

# NULL 불가 컬럼: null 값은 "변경 없음"으로 처리 (Non-nullable columns; null means unchanged)
_NON_NULLABLE_FIELDS: tuple[str, ...] = ("content", "is_task", "is_important")


class MemoService:
    """메모 서비스.

    Memo service. A memo may reference one of the requester's own videos;
    referencing anyone else's video is reported as not found. Tags are
    created on first use; each tag counts the memos carrying it and is
    removed once that count reaches zero.
    """

    async def _ensure_video_owned(self, db: AsyncSession, video_id: UUID, user_id: UUID) -> None:
        if await video_repository.get_owned(db, video_id, user_id) is None:
            raise NotFoundError("Video not found")

    async def get_owned_memo(self, db: AsyncSession, memo_id: UUID, user_id: UUID) -> Memo:
        """소유한 메모를 반환합니다. 없거나 타인 소유면 404.

        Raises:
            NotFoundError: 없거나 다른 사용자의 메모 (Missing or not owned)
        """
        memo: Memo | None = await memo_repository.get_owned(db, memo_id, user_id)
        if memo is None:
            raise NotFoundError("Memo not found")
        return memo

    async def create_memo(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: MemoCreateRequest,
    ) -> MemoResponse:
        """메모를 생성합니다.

        Create a memo, optionally pinned to a video position and tagged.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 요청자 UUID (Requesting user UUID)
            data: 메모 생성 데이터 (Memo creation data)

        Returns:
            MemoResponse: 생성된 메모 (Created memo)

        Raises:
            NotFoundError: 참조한 동영상이 없거나 타인 소유 (Video missing or not owned)
        """
        if data.video_id is not None:
            await self._ensure_video_owned(db, data.video_id, user_id)

        tags: list[Tag] = await tag_repository.find_or_create(db, user_id, data.tags)
        await tag_repository.adjust_usage(db, [tag.id for tag in tags], 1)
        memo: Memo = await memo_repository.create(db, {
            "user_id": user_id,
            "video_id": data.video_id,
            "content": data.content,
            "timestamp_seconds": data.timestamp_seconds,
            "is_task": data.is_task,
            "is_important": data.is_important,
            "tags": tags,
        })
        return await self.get_memo(db, memo.id, user_id)

    async def list_memos(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        filters: dict[str, Any] | None = None,
    ) -> PaginatedResult:
        """메모 목록을 조회합니다. (List the user's memos.)"""
        memos, total = await memo_repository.list_by_user(db, user_id, params, filters)
        return build_page([MemoResponse.model_validate(m) for m in memos], params, total)

    async def list_important(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
    ) -> PaginatedResult:
        """중요 메모 목록 (Important memos, newest first by default)."""
        return await self.list_memos(db, user_id, params, {"is_important": True})

    async def list_video_memos(
        self,
        db: AsyncSession,
        user_id: UUID,
        video_id: UUID,
    ) -> list[MemoResponse]:
        """동영상의 모든 메모를 재생 시점 순으로 조회합니다.

        All memos of one of the requester's videos, by timestamp ascending.

        Raises:
            NotFoundError: 동영상이 없거나 타인 소유 (Video missing or not owned)
        """
        await self._ensure_video_owned(db, video_id, user_id)
        memos: Sequence[Memo] = await memo_repository.list_by_video(db, user_id, video_id)
        return [MemoResponse.model_validate(m) for m in memos]

    async def get_memo(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
    ) -> MemoResponse:
        """메모 상세를 조회합니다. (Get one memo.)"""
        return MemoResponse.model_validate(await self.get_owned_memo(db, memo_id, user_id))

    async def update_memo(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
        data: MemoUpdateRequest,
    ) -> MemoResponse:
        """메모를 수정합니다 (부분 업데이트).

        Apply the fields present in the request. ``timestamp_seconds`` may be
        cleared with null; null for any other field leaves it unchanged.
        """
        update_data: dict[str, Any] = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _NON_NULLABLE_FIELDS
        }
        tag_names: list[str] | None = update_data.pop("tags", None)
        memo: Memo | None = await memo_repository.update_owned(db, memo_id, user_id, update_data)
        if memo is None:
            raise NotFoundError("Memo not found")
        if tag_names is not None:
            await self._replace_tags(db, memo, tag_names)
        return MemoResponse.model_validate(memo)

    async def _replace_tags(self, db: AsyncSession, memo: Memo, names: list[str]) -> None:
        """메모의 태그를 교체하고 사용 횟수를 조정합니다.

        Replace the memo's tag set: added tags count up, removed tags count
        down, and tags no longer used anywhere are deleted.
        """
        old_ids: set[UUID] = {tag.id for tag in memo.tags}
        tags: list[Tag] = await tag_repository.find_or_create(db, memo.user_id, names)
        new_ids: set[UUID] = {tag.id for tag in tags}
        memo.tags = tags
        await db.flush()
        await tag_repository.adjust_usage(db, list(new_ids - old_ids), 1)
        if old_ids - new_ids:
            await tag_repository.adjust_usage(db, list(old_ids - new_ids), -1)
            await tag_repository.delete_unused(db, memo.user_id)

    async def _update(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
        update_data: dict[str, Any],
    ) -> MemoResponse:
        memo: Memo | None = await memo_repository.update_owned(db, memo_id, user_id, update_data)
        if memo is None:
            raise NotFoundError("Memo not found")
        return MemoResponse.model_validate(memo)

    async def delete_memo(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
    ) -> None:
        """메모를 삭제합니다. 연결된 업무는 유지되고 연결만 해제.

        Delete a memo; tasks created from it remain, unlinked. Its tags
        count down and unused ones are removed.
        """
        memo: Memo = await self.get_owned_memo(db, memo_id, user_id)
        tag_ids: list[UUID] = [tag.id for tag in memo.tags]
        if not await memo_repository.delete_owned(db, memo_id, user_id):
            raise NotFoundError("Memo not found")
        if tag_ids:
            await tag_repository.adjust_usage(db, tag_ids, -1)
            await tag_repository.delete_unused(db, user_id)

    async def convert_to_task(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
    ) -> MemoResponse:
        """메모를 업무로 표시합니다 (is_task = true). (Flag the memo as a task.)"""
        return await self._update(db, memo_id, user_id, {"is_task": True})

    async def toggle_important(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
    ) -> MemoResponse:
        """중요 표시를 반전합니다.

        Flip ``is_important``. The negation is evaluated by the database.
        """
        return await self._update(db, memo_id, user_id, {"is_important": not_(Memo.is_important)})

    async def list_tags(
        self,
        db: AsyncSession,
        user_id: UUID,
        search: str | None = None,
        limit: int = 100,
    ) -> list[TagResponse]:
        """사용 중인 태그 목록 (Tags in use, most used first)."""
        tags: Sequence[Tag] = await tag_repository.list_by_user(db, user_id, search, limit)
        return [TagResponse.model_validate(tag) for tag in tags]
