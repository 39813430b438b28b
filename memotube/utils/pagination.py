"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides the generic paginate function, the allow-listed ORDER BY builder
and the case-insensitive search pattern helper shared by every list query.
"""

from typing import Any, Mapping, Sequence

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.schemas.common import ListParams, PaginatedResult, PaginationMeta
from memotube.utils.exceptions import ValidationFailedError

# LIKE 와일드카드 이스케이프 문자: Escape char for LIKE wildcards
_LIKE_ESCAPE: str = "\\"


def like_pattern(term: str) -> str:
    """검색어를 부분 일치 LIKE 패턴으로 변환합니다.

    Turn a user search term into a ``%term%`` pattern with ``%``, ``_``
    and the escape character itself escaped, so they match literally.
    """
    escaped: str = (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def search_clause(term: str, columns: Sequence[Any]) -> ColumnElement[bool]:
    """여러 텍스트 컬럼에 대한 대소문자 무시 부분 일치 조건 (OR).

    Case-insensitive substring match across one or more text columns.
    """
    pattern: str = like_pattern(term)
    return or_(*[column.ilike(pattern, escape=_LIKE_ESCAPE) for column in columns])


def order_clauses(
    sort_columns: Mapping[str, Any],
    sort: str | None,
    order: str,
    default_sort: str,
    tiebreaker: Any,
) -> list[Any]:
    """허용 목록에 있는 정렬 필드만 ORDER BY 절로 변환합니다.

    Map an allow-listed sort key to its column expression. Unknown keys are
    rejected rather than interpolated into SQL. ``tiebreaker`` keeps page
    boundaries stable when sort values repeat.

    Raises:
        ValidationFailedError: 허용되지 않은 정렬 필드 (Sort key not allowed)
    """
    key: str = sort or default_sort
    column = sort_columns.get(key)
    if column is None:
        raise ValidationFailedError(
            "Invalid sort field",
            details=[{"field": "sort", "message": f"Allowed values: {', '.join(sort_columns)}"}],
        )
    if order == "asc":
        return [column.asc(), tiebreaker.asc()]
    return [column.desc(), tiebreaker.desc()]


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    limit: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed, default: 1)
        limit: 페이지당 항목 수 (Items per page, default: 20)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
            (Tuple of paginated items and total count)
    """
    # 전체 개수 조회: 정렬을 제거한 서브쿼리로 COUNT 실행 (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회: OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    offset: int = (page - 1) * limit
    result = await db.execute(query.offset(offset).limit(limit))
    items: Sequence[Any] = result.scalars().all()

    return items, total


def build_page(items: list[Any], params: ListParams, total: int) -> PaginatedResult:
    """항목과 전체 개수로 페이지 결과를 만듭니다.

    Wrap a page of items with its pagination metadata.
    """
    return PaginatedResult(
        items=items,
        pagination=PaginationMeta.build(params.page, params.limit, total),
    )
