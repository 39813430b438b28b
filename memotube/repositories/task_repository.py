"""업무 레포지토리: 업무 관련 DB 쿼리 담당.

Task Repository: Handles all task-related database queries.
Extends BaseRepository with status/priority filtering, overdue and
upcoming queries, per-status statistics and rank-based priority sorting.
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.task import PRIORITY_RANK, TASK_STATUSES, Task
from memotube.repositories.base import BaseRepository
from memotube.schemas.common import ListParams
from memotube.utils.pagination import order_clauses, search_clause

# 우선순위 순위 식: urgent=4 > high=3 > medium=2 > low=1 (문자열 순서 아님)
_PRIORITY_RANK_EXPR = case(PRIORITY_RANK, value=Task.priority, else_=0)


def _overdue_clause(now: datetime) -> ColumnElement[bool]:
    """미완료이며 마감이 지난 업무 조건 (Not completed and past due)."""
    return and_(
        Task.status != "completed",
        Task.due_date.is_not(None),
        Task.due_date < now,
    )


class TaskRepository(BaseRepository[Task]):
    """업무 레포지토리.

    Task repository with filtering, statistics and priority ranking.

    Extends:
        BaseRepository[Task]
    """

    SORT_COLUMNS: dict[str, Any] = {
        "created_at": Task.created_at,
        "updated_at": Task.updated_at,
        "due_date": Task.due_date,
        "priority": _PRIORITY_RANK_EXPR,
    }
    SEARCH_COLUMNS: tuple[Any, ...] = (Task.title, Task.description)

    def __init__(self) -> None:
        super().__init__(Task)

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        filters: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> tuple[Sequence[Task], int]:
        """사용자 업무를 필터링하여 페이지네이션 조회합니다.

        Retrieve a page of the user's tasks.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 소유자 UUID (Owner UUID)
            params: 목록 파라미터 (page, limit, sort, order, search)
            filters: 추가 필터 (status, priority, video_id, memo_id, overdue)
            now: 기한 초과 판단 기준 시각 (Reference time for the overdue filter)

        Returns:
            tuple[Sequence[Task], int]: (업무 목록, 전체 개수)
        """
        query: Select = select(Task).where(Task.user_id == user_id)

        if filters:
            if filters.get("status") is not None:
                query = query.where(Task.status == filters["status"])
            if filters.get("priority") is not None:
                query = query.where(Task.priority == filters["priority"])
            if filters.get("video_id") is not None:
                query = query.where(Task.video_id == filters["video_id"])
            if filters.get("memo_id") is not None:
                query = query.where(Task.memo_id == filters["memo_id"])
            if filters.get("overdue") and now is not None:
                query = query.where(_overdue_clause(now))
        if params.search:
            query = query.where(search_clause(params.search, self.SEARCH_COLUMNS))

        query = query.order_by(
            *order_clauses(self.SORT_COLUMNS, params.sort, params.order, "created_at", Task.id)
        )
        return await self.get_paginated(db, query, params.page, params.limit)

    async def list_overdue(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
        limit: int | None = None,
    ) -> Sequence[Task]:
        """기한이 지난 미완료 업무를 마감일 순으로 조회합니다.

        Overdue tasks, oldest due date first.
        """
        query: Select = (
            select(Task)
            .where(Task.user_id == user_id, _overdue_clause(now))
            .order_by(Task.due_date.asc(), Task.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return result.scalars().all()

    async def list_upcoming(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
        until: datetime,
    ) -> Sequence[Task]:
        """마감이 [now, until] 구간에 있는 미완료 업무를 조회합니다.

        Not-completed tasks due between ``now`` and ``until``, earliest first.
        """
        result = await db.execute(
            select(Task)
            .where(
                Task.user_id == user_id,
                Task.status != "completed",
                Task.due_date.is_not(None),
                Task.due_date >= now,
                Task.due_date <= until,
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
        )
        return result.scalars().all()

    async def get_stats(
        self,
        db: AsyncSession,
        user_id: UUID,
        now: datetime,
    ) -> dict[str, int]:
        """상태별 업무 개수와 기한 초과 개수를 집계합니다.

        Count the user's tasks per status plus the overdue ones.

        Returns:
            dict[str, int]: total, pending, in_progress, completed, cancelled, overdue
        """
        columns = [func.count(Task.id).label("total")]
        for status_name in TASK_STATUSES:
            columns.append(
                func.coalesce(
                    func.sum(case((Task.status == status_name, 1), else_=0)), 0
                ).label(status_name)
            )
        columns.append(
            func.coalesce(func.sum(case((_overdue_clause(now), 1), else_=0)), 0).label("overdue")
        )

        row = (await db.execute(select(*columns).where(Task.user_id == user_id))).one()
        return {key: int(value) for key, value in row._mapping.items()}


# 싱글턴 인스턴스: Singleton instance (stateless)
task_repository: TaskRepository = TaskRepository()
