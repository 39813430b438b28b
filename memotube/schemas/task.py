"""업무 관련 Pydantic 요청/응답 스키마 정의.

Task request/response schema definitions.
Incoming datetimes are normalized to UTC before they reach the database.
"""

from datetime import datetime, timezone
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from memotube.schemas.common import CamelModel

TaskPriority = Literal["low", "medium", "high", "urgent"]
TaskStatus = Literal["pending", "in_progress", "completed", "cancelled"]
# 업무 정렬 허용 목록: Allow-listed task sort keys
TaskSort = Literal["created_at", "updated_at", "due_date", "priority"]


def _to_utc(value: datetime | None) -> datetime | None:
    """시간대 없는 값은 UTC로 간주하고, 있는 값은 UTC로 변환합니다."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskCreateRequest(CamelModel):
    """업무 생성 요청 스키마.

    Attributes:
        title: 제목 (Title, 1-500 chars)
        description: 설명 (Optional description)
        priority: 우선순위 (default: medium)
        due_date: 마감 일시 (Optional due date)
        memo_id: 원본 메모 UUID (Optional source memo)
        video_id: 관련 동영상 UUID (Optional related video)
    """

    title: str = Field(min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=65535)
    priority: TaskPriority = "medium"
    due_date: datetime | None = None
    memo_id: UUID | None = None
    video_id: UUID | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)


class TaskUpdateRequest(CamelModel):
    """업무 수정 요청 스키마 (부분 업데이트)."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=65535)
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None

    @field_validator("due_date", "completed_at")
    @classmethod
    def normalize_datetimes(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)


class TaskFromMemoRequest(CamelModel):
    """메모로부터 업무 생성 요청 스키마. 모든 필드 선택.

    Create-from-memo request; omitted fields are derived from the memo.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, max_length=65535)
    priority: TaskPriority = "medium"
    due_date: datetime | None = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, value: datetime | None) -> datetime | None:
        return _to_utc(value)


class TaskResponse(BaseModel):
    """업무 응답 스키마 (Task payload returned to clients)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    memo_id: UUID | None
    video_id: UUID | None
    title: str
    description: str | None
    priority: str
    status: str
    due_date: datetime | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class TaskStats(BaseModel):
    """상태별 업무 통계 (Per-status task counts)."""

    total: int
    pending: int
    in_progress: int
    completed: int
    cancelled: int
    overdue: int


class TaskDashboard(BaseModel):
    """대시보드 데이터 (Dashboard payload)."""

    stats: TaskStats
    overdue: list[TaskResponse]
    upcoming: list[TaskResponse]
    recent: list[TaskResponse]
