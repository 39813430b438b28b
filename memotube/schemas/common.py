"""공통 Pydantic 스키마 정의.

Common Pydantic schema definitions shared by every resource:
camelCase request base, list query parameters, pagination metadata,
and the paginated result wrapper.
"""

import math
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# 정렬 방향: Sort direction
SortOrder = Literal["asc", "desc"]


class CamelModel(BaseModel):
    """camelCase JSON 키를 사용하는 베이스 모델.

    Base model whose JSON keys are camelCase (``displayName``) while Python
    attributes stay snake_case. Accepts either spelling on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ListParams(BaseModel):
    """목록 조회 공통 파라미터.

    Common list query parameters. ``sort`` is already restricted to the
    resource's allow-list by the router; repositories map it to a column.

    Attributes:
        page: 페이지 번호, 1부터 시작 (Page number, 1-based)
        limit: 페이지당 항목 수 (Items per page, 1..100)
        sort: 정렬 필드 (Sort field, allow-listed per resource)
        order: 정렬 방향 (asc | desc)
        search: 검색어, 대소문자 무시 부분 일치 (Case-insensitive substring)
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort: str | None = None
    order: SortOrder = "desc"
    search: str | None = None

    @property
    def offset(self) -> int:
        """OFFSET 값: (page - 1) * limit."""
        return (self.page - 1) * self.limit


class PaginationMeta(CamelModel):
    """페이지네이션 메타데이터.

    Attributes:
        page: 현재 페이지 번호 (Current page, 1-based)
        limit: 페이지당 항목 수 (Items per page)
        total: 전체 항목 수 (Total item count)
        total_pages: 전체 페이지 수: ceil(total / limit)
        has_next: 다음 페이지 존재 여부 (page < total_pages)
        has_prev: 이전 페이지 존재 여부 (page > 1)
    """

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        """페이지/한도/전체 개수로 메타데이터를 계산합니다.

        Compute pagination metadata from page, limit and total count.
        """
        total_pages: int = math.ceil(total / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PaginatedResult(BaseModel, Generic[T]):
    """페이지네이션 결과 래퍼 (Paginated result wrapper)."""

    items: list[T]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    """단순 메시지 응답 (Simple message payload)."""

    message: str
