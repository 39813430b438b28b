"""기본 CRUD 레포지토리: 모든 레포지토리의 부모 클래스.

Base CRUD Repository: Parent class for all user-owned resource repositories.
Provides generic Create, Read, Update, Delete operations with ownership
scoping on ``user_id``.

Usage:
    class MemoRepository(BaseRepository[Memo]):
        def __init__(self) -> None:
            super().__init__(Memo)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.database import Base
from memotube.utils.pagination import paginate

# 제네릭 타입 변수: SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Mutations on user-owned records are single conditional statements
    (``WHERE id = :id AND user_id = :user_id``), so ownership cannot change
    between the check and the write.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다. 소유자 필터 없음.

        Retrieve a single record by its UUID alone (no owner filter).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def get_owned(
        self,
        db: AsyncSession,
        record_id: UUID,
        user_id: UUID,
    ) -> ModelType | None:
        """요청자가 소유한 레코드만 반환합니다.

        Look the record up by id, then compare its owner. A record owned by
        someone else is reported exactly like a missing one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 레코드 UUID (Record UUID)
            user_id: 요청자 UUID (Requesting user UUID)

        Returns:
            ModelType | None: 소유 레코드 또는 None (Owned record or None)
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None or db_obj.user_id != user_id:
            return None
        return db_obj

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve a paginated list of records.

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
                                             (List of records, total count)
        """
        return await paginate(db, query, page, limit)

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update_owned(
        self,
        db: AsyncSession,
        record_id: UUID,
        user_id: UUID,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """소유자 조건부 UPDATE 후 갱신된 레코드를 반환합니다.

        Update a record only if it belongs to ``user_id``, in one statement.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 업데이트할 레코드의 UUID (UUID of the record to update)
            user_id: 요청자 UUID (Requesting user UUID)
            update_data: 업데이트할 필드와 값의 딕셔너리
                         (Dictionary of fields and values to update)

        Returns:
            ModelType | None: 업데이트된 레코드, 대상이 없으면 None
                              (Updated record, or None when nothing matched)
        """
        values: dict[str, Any] = {
            field: value for field, value in update_data.items() if hasattr(self.model, field)
        }
        if values:
            stmt = (
                update(self.model)
                .where(self.model.id == record_id, self.model.user_id == user_id)
                .values(**values)
                # 갱신된 행은 아래 get_owned가 populate_existing으로 다시 읽음
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            if result.rowcount == 0:
                return None
            await db.flush()
        return await self.get_owned(db, record_id, user_id)

    async def delete_owned(
        self,
        db: AsyncSession,
        record_id: UUID,
        user_id: UUID,
    ) -> bool:
        """소유자 조건부 DELETE.

        Delete a record only if it belongs to ``user_id``, in one statement.

        Returns:
            bool: 삭제 성공 여부 (Whether a row was deleted)
        """
        stmt = delete(self.model).where(
            self.model.id == record_id, self.model.user_id == user_id
        )
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount > 0
