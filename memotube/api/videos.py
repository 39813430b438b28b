"""동영상 라우터: 저장된 YouTube 동영상 API.

Video Router: Endpoints for saved YouTube videos under ``/api/videos``.
All endpoints require an access token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.api.deps import Context, CurrentIdentity
from memotube.database import get_db
from memotube.schemas.common import ListParams, MessageResponse, PaginatedResult, SortOrder
from memotube.schemas.video import (
    VideoMetadata,
    VideoResponse,
    VideoSaveRequest,
    VideoSort,
    VideoUpdateRequest,
)
from memotube.utils.responses import success_response

router: APIRouter = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_video(
    request: Request,
    data: VideoSaveRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """YouTube URL로 동영상 저장. 이미 저장된 경우 기존 레코드 반환.

    Save a video by URL; an already-saved video is returned as is.
    """
    video: VideoResponse = await context.video_service.save_video(db, identity.user_uuid, data.youtube_url)
    await db.commit()
    return success_response(request, {"video": video})


@router.get("")
async def list_videos(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    sort: VideoSort | None = None,
    order: SortOrder = "desc",
    search: str | None = None,
    archived: bool | None = None,
) -> dict:
    """동영상 목록 조회 (필터: archived, 검색, 정렬).

    List the user's videos.

    Args:
        page: 페이지 번호 (Page number)
        limit: 페이지당 항목 수 (Items per page, 1..100)
        sort: 정렬 필드 (saved_at | published_at | title | last_watched_at)
        order: 정렬 방향 (asc | desc)
        search: 제목/설명/채널명 검색어 (Title/description/channel search)
        archived: 보관 여부 필터 (Archived filter)
    """
    params = ListParams(page=page, limit=limit, sort=sort, order=order, search=search)
    result: PaginatedResult = await context.video_service.list_videos(
        db, identity.user_uuid, params, archived
    )
    return success_response(request, result)


@router.get("/search")
async def search_videos(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
    q: Annotated[str, Query(min_length=1)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """동영상 검색. (Search the user's videos.)"""
    params = ListParams(page=page, limit=limit, search=q.strip())
    result: PaginatedResult = await context.video_service.list_videos(db, identity.user_uuid, params)
    return success_response(request, result)


@router.get("/preview")
async def preview_video(
    request: Request,
    identity: CurrentIdentity,
    context: Context,
    url: Annotated[str, Query(min_length=1)],
) -> dict:
    """저장 없이 메타데이터 미리보기. (Preview metadata without saving.)"""
    metadata: VideoMetadata = await context.video_service.preview(url)
    return success_response(request, {"video_metadata": metadata, "youtube_url": url.strip()})


@router.get("/{video_id}")
async def get_video(
    request: Request,
    video_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """동영상 상세 조회. (Get one video.)"""
    video: VideoResponse = await context.video_service.get_video(db, video_id, identity.user_uuid)
    return success_response(request, {"video": video})


@router.put("/{video_id}")
async def update_video(
    request: Request,
    video_id: UUID,
    data: VideoUpdateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """동영상 수정 (보관 상태). (Update the archive flag.)"""
    video: VideoResponse = await context.video_service.update_video(
        db, video_id, identity.user_uuid, data
    )
    await db.commit()
    return success_response(request, {"video": video})


@router.delete("/{video_id}")
async def delete_video(
    request: Request,
    video_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """동영상 삭제. (Delete a video with its memos.)"""
    await context.video_service.delete_video(db, video_id, identity.user_uuid)
    await db.commit()
    return success_response(request, MessageResponse(message="Video deleted successfully"))


@router.post("/{video_id}/watch")
async def mark_watched(
    request: Request,
    video_id: UUID,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """시청 기록. (Record a viewing.)"""
    video: VideoResponse = await context.video_service.mark_watched(db, video_id, identity.user_uuid)
    await db.commit()
    return success_response(request, {"video": video})
