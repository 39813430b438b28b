"""메모 관련 Pydantic 요청/응답 스키마 정의.

Memo request/response schema definitions.
"""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from memotube.schemas.common import CamelModel

# 메모 정렬 허용 목록: Allow-listed memo sort keys
MemoSort = Literal["created_at", "updated_at", "timestamp_seconds"]

# 메모 내용 최대 길이 (TEXT 컬럼 기준): Max memo content length
MAX_CONTENT_LENGTH: int = 65535
# 태그 이름 최대 길이: Max tag name length
MAX_TAG_LENGTH: int = 100


def normalize_tags(names: list[str]) -> list[str]:
    """태그 이름 정규화: 앞뒤 공백 제거, 빈 값 제외, 중복 제거(순서 유지).

    Strip each name, drop blanks and duplicates (first occurrence wins).

    Raises:
        ValueError: 이름이 최대 길이 초과 (A name longer than MAX_TAG_LENGTH)
    """
    normalized: list[str] = []
    for name in names:
        name = name.strip()
        if len(name) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag must be at most {MAX_TAG_LENGTH} characters")
        if name and name not in normalized:
            normalized.append(name)
    return normalized


# 정규화된 태그 이름 목록 (Normalized tag names)
TagNames = Annotated[list[str], AfterValidator(normalize_tags)]


class MemoCreateRequest(CamelModel):
    """메모 생성 요청 스키마.

    Attributes:
        video_id: 동영상 UUID, 선택 (Optional video the memo belongs to)
        content: 메모 내용 (Memo text)
        timestamp_seconds: 동영상 내 시점(초) (Position in seconds, >= 0)
        is_task: 업무 여부 (Task flag)
        is_important: 중요 여부 (Important flag)
        tags: 태그 이름 목록 (Tag names; created on first use)
    """

    video_id: UUID | None = None
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    timestamp_seconds: int | None = Field(default=None, ge=0)
    is_task: bool = False
    is_important: bool = False
    tags: TagNames = Field(default_factory=list)


class MemoUpdateRequest(CamelModel):
    """메모 수정 요청 스키마 (부분 업데이트).

    Only the fields present in the request body are applied;
    ``timestampSeconds: null`` clears the timestamp.
    ``tags`` replaces the whole tag set; ``[]`` removes every tag.
    """

    content: str | None = Field(default=None, min_length=1, max_length=MAX_CONTENT_LENGTH)
    timestamp_seconds: int | None = Field(default=None, ge=0)
    is_task: bool | None = None
    is_important: bool | None = None
    tags: TagNames | None = None


class MemoResponse(BaseModel):
    """메모 응답 스키마 (Memo payload returned to clients)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    video_id: UUID | None
    content: str
    timestamp_seconds: int | None
    is_task: bool
    is_important: bool
    tags: list[str] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def tag_names(cls, value: Any) -> list[str]:
        """ORM 태그 객체를 이름으로 변환 (Tag rows to their names, sorted)."""
        return sorted(tag if isinstance(tag, str) else tag.name for tag in value or [])


class TagResponse(BaseModel):
    """태그 응답 스키마 (Tag with its usage count)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    usage_count: int
