"""업무 라우터: 업무 API.

Task Router: Endpoints for tasks under ``/api/tasks``.
All endpoints require an access token. Static paths (``/search``,
``/stats``, ``/overdue``, ``/upcoming``, ``/dashboard``) are declared
before ``/{task_id}``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.api.deps import Context, CurrentIdentity
from memotube.database import get_db
from memotube.schemas.common import ListParams, MessageResponse, PaginatedResult, SortOrder
from memotube.schemas.task import (
    TaskCreateRequest,
    TaskDashboard,
    TaskFromMemoRequest,
    TaskPriority,
    TaskResponse,
    TaskSort,
    TaskStats,
    TaskStatus,
    TaskUpdateRequest,
)
from memotube.utils.responses import success_response

router: APIRouter = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(
    request: Request,
    data: TaskCreateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 생성. (Create a task.)"""
    task: TaskResponse = await context.task_service.create_task(db, identity.user_uuid, data)
    await db.commit()
    return success_response(request, {"task": task})


@router.get("")
async def list_tasks(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort: TaskSort | None = None,
    order: SortOrder = "desc",
    search: str | None = None,
    task_status: Annotated[TaskStatus | None, Query(alias="status")] = None,
    priority: TaskPriority | None = None,
    video_id: Annotated[UUID | None, Query(alias="videoId")] = None,
    overdue: bool | None = None,
) -> dict:
    """업무 목록 조회 (필터: status, priority, videoId, overdue).

    List the user's tasks. ``sort=priority`` orders by rank
    (urgent > high > medium > low), not alphabetically.
    """
    params = ListParams(page=page, limit=limit, sort=sort, order=order, search=search)
    filters: dict = {
        "status": task_status,
        "priority": priority,
        "video_id": video_id,
        "overdue": overdue,
    }
    result: PaginatedResult = await context.task_service.list_tasks(
        db, identity.user_uuid, params, filters
    )
    return success_response(request, result)


@router.get("/search")
async def search_tasks(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    q: Annotated[str, Query(min_length=1)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """업무 검색 (제목/설명). (Search task title and description.)"""
    params = ListParams(page=page, limit=limit, search=q.strip())
    result: PaginatedResult = await context.task_service.list_tasks(db, identity.user_uuid, params)
    return success_response(request, result)


@router.get("/stats")
async def get_task_stats(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """상태별 업무 통계. (Per-status task counts.)"""
    stats: TaskStats = await context.task_service.get_stats(db, identity.user_uuid)
    return success_response(request, {"stats": stats})


@router.get("/overdue")
async def get_overdue_tasks(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """기한 초과 업무. (Overdue tasks.)"""
    tasks: list[TaskResponse] = await context.task_service.get_overdue(db, identity.user_uuid)
    return success_response(request, {"tasks": tasks})


@router.get("/upcoming")
async def get_upcoming_tasks(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    days: Annotated[int, Query(ge=1, le=365)] = 7,
) -> dict:
    """향후 N일 내 마감 업무. (Tasks due within the next ``days`` days.)"""
    tasks: list[TaskResponse] = await context.task_service.get_upcoming(db, identity.user_uuid, days)
    return success_response(request, {"tasks": tasks})


@router.get("/dashboard")
async def get_dashboard(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """대시보드 데이터. (Stats, overdue, upcoming and recent tasks.)"""
    dashboard: TaskDashboard = await context.task_service.get_dashboard(db, identity.user_uuid)
    return success_response(request, dashboard)


@router.post("/from-memo/{memo_id}", status_code=status.HTTP_201_CREATED)
async def create_task_from_memo(
    request: Request,
    memo_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    data: Annotated[TaskFromMemoRequest | None, Body()] = None,
) -> dict:
    """메모로부터 업무 생성. 본문은 선택.

    Create a task from a memo. The body is optional; omitted fields are
    derived from the memo.
    """
    task: TaskResponse = await context.task_service.create_from_memo(
        db, memo_id, identity.user_uuid, data or TaskFromMemoRequest()
    )
    await db.commit()
    return success_response(request, {"task": task})


@router.get("/{task_id}")
async def get_task(
    request: Request,
    task_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 상세 조회. (Get one task.)"""
    task: TaskResponse = await context.task_service.get_task(db, task_id, identity.user_uuid)
    return success_response(request, {"task": task})


@router.put("/{task_id}")
async def update_task(
    request: Request,
    task_id: UUID,
    data: TaskUpdateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 수정 (부분 업데이트). (Partially update a task.)"""
    task: TaskResponse = await context.task_service.update_task(db, task_id, identity.user_uuid, data)
    await db.commit()
    return success_response(request, {"task": task})


@router.delete("/{task_id}")
async def delete_task(
    request: Request,
    task_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 삭제. (Delete a task.)"""
    await context.task_service.delete_task(db, task_id, identity.user_uuid)
    await db.commit()
    return success_response(request, MessageResponse(message="Task deleted successfully"))


@router.post("/{task_id}/complete")
async def complete_task(
    request: Request,
    task_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 완료. (Mark a task completed.)"""
    task: TaskResponse = await context.task_service.complete_task(db, task_id, identity.user_uuid)
    await db.commit()
    return success_response(request, {"task": task})


@router.post("/{task_id}/reopen")
async def reopen_task(
    request: Request,
    task_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """업무 재개. (Reopen a task.)"""
    task: TaskResponse = await context.task_service.reopen_task(db, task_id, identity.user_uuid)
    await db.commit()
    return success_response(request, {"task": task})
