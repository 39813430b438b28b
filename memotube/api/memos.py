"""메모 라우터: 메모 API.

Memo Router: Endpoints for memos under ``/api/memos``.
All endpoints require an access token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.api.deps import Context, CurrentIdentity
from memotube.database import get_db
from memotube.schemas.common import ListParams, MessageResponse, PaginatedResult, SortOrder
from memotube.schemas.memo import (
    MemoCreateRequest,
    MemoResponse,
    MemoSort,
    MemoUpdateRequest,
    TagResponse,
)
from memotube.utils.responses import success_response

router: APIRouter = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_memo(
    request: Request,
    data: MemoCreateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """메모 생성. (Create a memo.)"""
    memo: MemoResponse = await context.memo_service.create_memo(db, identity.user_uuid, data)
    await db.commit()
    return success_response(request, {"memo": memo})


@router.get("")
async def list_memos(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort: MemoSort | None = None,
    order: SortOrder = "desc",
    search: str | None = None,
    video_id: Annotated[UUID | None, Query(alias="videoId")] = None,
    is_task: Annotated[bool | None, Query(alias="isTask")] = None,
    is_important: Annotated[bool | None, Query(alias="isImportant")] = None,
    tags: str | None = None,
) -> dict:
    """메모 목록 조회 (필터: videoId, isTask, isImportant, tags).

    List the user's memos.

    Args:
        page: 페이지 번호 (Page number)
        limit: 페이지당 항목 수 (Items per page, 1..100)
        sort: 정렬 필드 (created_at | updated_at | timestamp_seconds)
        order: 정렬 방향 (asc | desc)
        search: 내용 검색어 (Content search)
        video_id: 동영상 필터 (Video filter)
        is_task: 업무 여부 필터 (Task flag filter)
        is_important: 중요 여부 필터 (Important flag filter)
        tags: 쉼표로 구분한 태그 이름, 하나라도 일치 (Comma-separated tag names, any match)
    """
    params = ListParams(page=page, limit=limit, sort=sort, order=order, search=search)
    filters: dict = {
        "video_id": video_id,
        "is_task": is_task,
        "is_important": is_important,
        "tags": [name.strip() for name in tags.split(",") if name.strip()] if tags else None,
    }
    result: PaginatedResult = await context.memo_service.list_memos(
        db, identity.user_uuid, params, filters
    )
    return success_response(request, result)


@router.get("/search")
async def search_memos(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    q: Annotated[str, Query(min_length=1)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """메모 검색. (Search memo content.)"""
    params = ListParams(page=page, limit=limit, search=q.strip())
    result: PaginatedResult = await context.memo_service.list_memos(db, identity.user_uuid, params)
    return success_response(request, result)


@router.get("/important")
async def list_important_memos(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """중요 메모 목록. (Important memos.)"""
    params = ListParams(page=page, limit=limit)
    result: PaginatedResult = await context.memo_service.list_important(db, identity.user_uuid, params)
    return success_response(request, result)


@router.get("/tags")
async def list_tags(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    search: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> dict:
    """사용 중인 태그 목록 (많이 쓰인 순). (Tags in use, most used first.)"""
    tags: list[TagResponse] = await context.memo_service.list_tags(db, identity.user_uuid, search, limit)
    return success_response(request, {"tags": tags})


@router.get("/video/{video_id}")
async def list_video_memos(
    request: Request,
    video_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """동영상의 모든 메모 (재생 시점 순). (All memos of a video, by timestamp.)"""
    memos: list[MemoResponse] = await context.memo_service.list_video_memos(
        db, identity.user_uuid, video_id
    )
    return success_response(request, {"memos": memos})


@router.get("/{memo_id}")
async def get_memo(
    request: Request,
    memo_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """메모 상세 조회. (Get one memo.)"""
    memo: MemoResponse = await context.memo_service.get_memo(db, memo_id, identity.user_uuid)
    return success_response(request, {"memo": memo})


@router.put("/{memo_id}")
async def update_memo(
    request: Request,
    memo_id: UUID,
    data: MemoUpdateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """메모 수정 (부분 업데이트). (Partially update a memo.)"""
    memo: MemoResponse = await context.memo_service.update_memo(db, memo_id, identity.user_uuid, data)
    await db.commit()
    return success_response(request, {"memo": memo})


@router.delete("/{memo_id}")
async def delete_memo(
    request: Request,
    memo_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """메모 삭제. (Delete a memo.)"""
    await context.memo_service.delete_memo(db, memo_id, identity.user_uuid)
    await db.commit()
    return success_response(request, MessageResponse(message="Memo deleted successfully"))


@router.post("/{memo_id}/convert-to-task")
async def convert_to_task(
    request: Request,
    memo_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """메모를 업무로 표시. (Flag the memo as a task.)"""
    memo: MemoResponse = await context.memo_service.convert_to_task(db, memo_id, identity.user_uuid)
    await db.commit()
    return success_response(request, {"memo": memo})


@router.post("/{memo_id}/toggle-important")
async def toggle_important(
    request: Request,
    memo_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """중요 표시 반전. (Flip the important flag.)"""
    memo: MemoResponse = await context.memo_service.toggle_important(db, memo_id, identity.user_uuid)
    await db.commit()
    return success_response(request, {"memo": memo})
