"""업무 서비스: 업무 비즈니스 로직.

Task Service: Business logic for tasks.
Handles CRUD with memo/video ownership checks, the completed_at status
rule, overdue/upcoming queries, statistics, the dashboard and creating a
task from a memo.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import DateTime, case, literal
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.memo import Memo
from memotube.models.task import Task
from memotube.repositories.memo_repository import memo_repository
from memotube.repositories.task_repository import task_repository
from memotube.repositories.video_repository import video_repository
from memotube.schemas.common import ListParams, PaginatedResult
from memotube.schemas.task import (
    TaskCreateRequest,
    TaskDashboard,
    TaskFromMemoRequest,
    TaskResponse,
    TaskStats,
    TaskUpdateRequest,
)
from memotube.utils.exceptions import NotFoundError
from memotube.utils.pagination import build_page

# 대시보드 각 구역의 항목 수 (Items per dashboard section)
DASHBOARD_SECTION_SIZE: int = 5
# 메모에서 만든 업무 제목 최대 길이 (Title length taken from memo content)
MEMO_TITLE_LENGTH: int = 100

_NON_NULLABLE_FIELDS: tuple[str, ...] = ("title", "priority", "status")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp_unless_completed(stamp: datetime):
    """이미 완료된 업무는 기존 완료 시각 유지 (Keep the stored time if already completed)."""
    return case(
        (Task.status == "completed", Task.completed_at),
        else_=literal(stamp, DateTime(timezone=True)),
    )


def _only_if_completed(value: datetime):
    """완료 상태에서만 완료 시각 변경 (Only a completed task takes a new time)."""
    return case(
        (Task.status == "completed", literal(value, DateTime(timezone=True))),
        else_=Task.completed_at,
    )


def _to_responses(tasks: Sequence[Task]) -> list[TaskResponse]:
    return [TaskResponse.model_validate(t) for t in tasks]


class TaskService:
    """업무 서비스.

    Task service. Tasks may reference the requester's own memo and video;
    references to other users' records are reported as not found.
    """

    async def _check_references(
        self,
        db: AsyncSession,
        user_id: UUID,
        memo_id: UUID | None,
        video_id: UUID | None,
    ) -> None:
        """참조 메모/동영상의 소유권을 검증합니다.

        Raises:
            NotFoundError: 메모나 동영상이 없거나 타인 소유 (Missing or not owned)
        """
        if memo_id is not None and await memo_repository.get_owned(db, memo_id, user_id) is None:
            raise NotFoundError("Memo not found")
        if video_id is not None and await video_repository.get_owned(db, video_id, user_id) is None:
            raise NotFoundError("Video not found")

    async def create_task(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: TaskCreateRequest,
    ) -> TaskResponse:
        """업무를 생성합니다.

        Create a task, optionally linked to a memo and/or a video.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 요청자 UUID (Requesting user UUID)
            data: 업무 생성 데이터 (Task creation data)

        Returns:
            TaskResponse: 생성된 업무 (Created task)

        Raises:
            NotFoundError: 참조 메모/동영상이 없거나 타인 소유
                           (Referenced memo or video missing or not owned)
        """
        await self._check_references(db, user_id, data.memo_id, data.video_id)
        task: Task = await task_repository.create(db, {
            "user_id": user_id,
            "title": data.title,
            "description": data.description,
            "priority": data.priority,
            "due_date": data.due_date,
            "memo_id": data.memo_id,
            "video_id": data.video_id,
        })
        return TaskResponse.model_validate(task)

    async def list_tasks(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: ListParams,
        filters: dict[str, Any] | None = None,
    ) -> PaginatedResult:
        """업무 목록을 조회합니다. (List the user's tasks.)"""
        tasks, total = await task_repository.list_by_user(db, user_id, params, filters, now=_now())
        return build_page(_to_responses(tasks), params, total)

    async def get_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        user_id: UUID,
    ) -> TaskResponse:
        """업무 상세를 조회합니다.

        Raises:
            NotFoundError: 없거나 다른 사용자의 업무 (Missing or not owned)
        """
        task: Task | None = await task_repository.get_owned(db, task_id, user_id)
        if task is None:
            raise NotFoundError("Task not found")
        return TaskResponse.model_validate(task)

    async def update_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        user_id: UUID,
        data: TaskUpdateRequest,
    ) -> TaskResponse:
        """업무를 수정합니다 (부분 업데이트).

        Apply the fields present in the request. ``completed_at`` is decided
        against the stored status inside the same UPDATE:

        - status ``completed``: the supplied time if any; otherwise the
          stored time when already completed, else now.
        - any other status: cleared.
        - no status: a supplied time only lands on an already completed
          task and is ignored otherwise.
        """
        update_data: dict[str, Any] = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _NON_NULLABLE_FIELDS
        }
        supplied: datetime | None = update_data.pop("completed_at", None)
        status: str | None = update_data.get("status")
        if status == "completed":
            update_data["completed_at"] = (
                literal(supplied, DateTime(timezone=True)) if supplied else _stamp_unless_completed(_now())
            )
        elif status is not None:
            update_data["completed_at"] = None
        elif supplied is not None:
            update_data["completed_at"] = _only_if_completed(supplied)
        return await self._update(db, task_id, user_id, update_data)

    async def _update(
        self,
        db: AsyncSession,
        task_id: UUID,
        user_id: UUID,
        update_data: dict[str, Any],
    ) -> TaskResponse:
        task: Task | None = await task_repository.update_owned(db, task_id, user_id, update_data)
        if task is None:
            raise NotFoundError("Task not found")
        return TaskResponse.model_validate(task)

    async def delete_task(
        self,
        db: AsyncSession,
        task_id: UUID,
        user_id: UUID,
    ) -> None:
        """업무를 삭제합니다. (Delete a task.)"""
        if not await task_repository.delete_owned(db, task_id, user_id):
            raise NotFoundError("Task not found")

    async def complete_task(self, db: AsyncSession, task_id: UUID, user_id: UUID) -> TaskResponse:
        """업무 완료 처리 (Mark completed; an already completed task keeps its completed_at)."""
        return await self._update(
            db, task_id, user_id, {"status": "completed", "completed_at": _stamp_unless_completed(_now())}
        )

    async def reopen_task(self, db: AsyncSession, task_id: UUID, user_id: UUID) -> TaskResponse:
        """업무 재개 처리 (Back to pending, clearing completed_at)."""
        return await self._update(db, task_id, user_id, {"status": "pending", "completed_at": None})

    async def get_stats(self, db: AsyncSession, user_id: UUID) -> TaskStats:
        """상태별 업무 통계 (Per-status counts plus overdue)."""
        return TaskStats(**await task_repository.get_stats(db, user_id, _now()))

    async def get_overdue(
        self,
        db: AsyncSession,
        user_id: UUID,
        limit: int | None = None,
    ) -> list[TaskResponse]:
        """기한 초과 업무 (Overdue tasks, oldest due date first)."""
        return _to_responses(await task_repository.list_overdue(db, user_id, _now(), limit))

    async def get_upcoming(
        self,
        db: AsyncSession,
        user_id: UUID,
        days: int = 7,
    ) -> list[TaskResponse]:
        """향후 ``days``일 내 마감 업무 (Tasks due within the next ``days`` days)."""
        now: datetime = _now()
        tasks: Sequence[Task] = await task_repository.list_upcoming(
            db, user_id, now, now + timedelta(days=days)
        )
        return _to_responses(tasks)

    async def get_dashboard(self, db: AsyncSession, user_id: UUID) -> TaskDashboard:
        """대시보드: 통계, 기한 초과, 예정, 최근 업무 각 5건.

        Dashboard: stats plus the first five overdue, upcoming and most
        recently created tasks.
        """
        recent: PaginatedResult = await self.list_tasks(
            db,
            user_id,
            ListParams(page=1, limit=DASHBOARD_SECTION_SIZE, sort="created_at", order="desc"),
        )
        upcoming: list[TaskResponse] = await self.get_upcoming(db, user_id)
        return TaskDashboard(
            stats=await self.get_stats(db, user_id),
            overdue=await self.get_overdue(db, user_id, DASHBOARD_SECTION_SIZE),
            upcoming=upcoming[:DASHBOARD_SECTION_SIZE],
            recent=recent.items,
        )

    async def create_from_memo(
        self,
        db: AsyncSession,
        memo_id: UUID,
        user_id: UUID,
        data: TaskFromMemoRequest,
    ) -> TaskResponse:
        """메모로부터 업무를 생성하고 메모를 업무로 표시합니다.

        Create a task from a memo: the title defaults to the first 100
        characters of the memo, the description to its full content, and the
        task is linked to the memo and the memo's video. The memo is then
        flagged ``is_task``.

        Raises:
            NotFoundError: 메모가 없거나 타인 소유 (Memo missing or not owned)
        """
        memo: Memo | None = await memo_repository.get_owned(db, memo_id, user_id)
        if memo is None:
            raise NotFoundError("Memo not found")

        task: Task = await task_repository.create(db, {
            "user_id": user_id,
            "title": data.title or memo.content[:MEMO_TITLE_LENGTH],
            "description": data.description or memo.content,
            "priority": data.priority,
            "due_date": data.due_date,
            "memo_id": memo.id,
            "video_id": memo.video_id,
        })
        await memo_repository.update_owned(db, memo.id, user_id, {"is_task": True})
        return TaskResponse.model_validate(task)
