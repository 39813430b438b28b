"""태그 레포지토리: 태그 및 사용 횟수 관련 DB 쿼리 담당.

Tag Repository: Handles tag lookup/creation and usage counting.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.memo import Memo
from memotube.models.tag import Tag, memo_tags
from memotube.repositories.base import BaseRepository
from memotube.utils.pagination import search_clause


class TagRepository(BaseRepository[Tag]):
    """태그 레포지토리.

    Tag repository. Counts are adjusted with single UPDATE statements
    (``usage_count = usage_count + :delta``) and never go below zero.

    Extends:
        BaseRepository[Tag]
    """

    def __init__(self) -> None:
        super().__init__(Tag)

    async def find_or_create(
        self,
        db: AsyncSession,
        user_id: UUID,
        names: Sequence[str],
    ) -> list[Tag]:
        """이름으로 태그를 찾고 없으면 생성합니다.

        Return the user's tags for ``names`` in the given order, creating
        the missing ones with a zero count.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 UUID (Owner UUID)
            names: 정규화된 태그 이름 (Normalized, de-duplicated names)

        Returns:
            list[Tag]: 태그 목록 (Tags, same order as ``names``)
        """
        if not names:
            return []
        result = await db.execute(select(Tag).where(Tag.user_id == user_id, Tag.name.in_(names)))
        by_name: dict[str, Tag] = {tag.name: tag for tag in result.scalars().all()}
        for name in names:
            if name not in by_name:
                tag = Tag(user_id=user_id, name=name, usage_count=0)
                db.add(tag)
                by_name[name] = tag
        await db.flush()
        return [by_name[name] for name in names]

    async def adjust_usage(self, db: AsyncSession, tag_ids: Sequence[UUID], delta: int) -> None:
        """사용 횟수를 ``delta``만큼 증감합니다. (Add ``delta`` to each count.)"""
        if not tag_ids or delta == 0:
            return
        stmt = update(Tag).where(Tag.id.in_(tag_ids))
        if delta < 0:
            stmt = stmt.where(Tag.usage_count >= -delta)
        await db.execute(
            stmt.values(usage_count=Tag.usage_count + delta).execution_options(synchronize_session=False)
        )

    async def release_video(self, db: AsyncSession, user_id: UUID, video_id: UUID) -> None:
        """동영상 삭제 전, 해당 동영상 메모들의 태그 사용 횟수를 차감합니다.

        Before a video (and with it, its memos) is deleted, subtract from
        each tag the number of the video's memos that carry it.
        """
        used = (
            select(func.count())
            .select_from(memo_tags.join(Memo, Memo.id == memo_tags.c.memo_id))
            .where(
                memo_tags.c.tag_id == Tag.id,
                Memo.user_id == user_id,
                Memo.video_id == video_id,
            )
            .scalar_subquery()
        )
        await db.execute(
            update(Tag)
            .where(Tag.user_id == user_id)
            .values(usage_count=case((Tag.usage_count > used, Tag.usage_count - used), else_=0))
            .execution_options(synchronize_session=False)
        )

    async def delete_unused(self, db: AsyncSession, user_id: UUID) -> int:
        """사용되지 않는 태그를 삭제합니다. (Delete the user's tags with a zero count.)"""
        result = await db.execute(
            delete(Tag)
            .where(Tag.user_id == user_id, Tag.usage_count <= 0)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        search: str | None = None,
        limit: int = 100,
    ) -> Sequence[Tag]:
        """사용 중인 태그를 많이 쓰인 순으로 조회합니다.

        The user's tags, most used first, then by name.
        """
        query = select(Tag).where(Tag.user_id == user_id, Tag.usage_count > 0)
        if search:
            query = query.where(search_clause(search, (Tag.name,)))
        result = await db.execute(query.order_by(Tag.usage_count.desc(), Tag.name.asc()).limit(limit))
        return result.scalars().all()


# 싱글턴 인스턴스: Singleton instance (stateless)
tag_repository: TagRepository = TagRepository()
