"""사용자 레포지토리: 사용자 관련 DB 쿼리 담당.

User Repository: Handles all user-related database queries.
Users are not owned by another user, so this repository does not extend
BaseRepository's ownership-scoped helpers.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.models.user import User


class UserRepository:
    """사용자 레포지토리.

    User repository: lookups by id/email/username, creation and updates.
    """

    async def get_by_id(
        self,
        db: AsyncSession,
        user_id: UUID,
        active_only: bool = True,
    ) -> User | None:
        """ID로 사용자를 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            active_only: 비활성 사용자 제외 여부 (Skip deactivated users)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        query: Select = select(User).where(User.id == user_id)
        if active_only:
            query = query.where(User.is_active.is_(True))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
        active_only: bool = False,
    ) -> User | None:
        """이메일로 사용자를 조회합니다. 이메일은 소문자로 비교.

        Retrieve a user by email (compared lower-cased).
        """
        query: Select = select(User).where(User.email == email.strip().lower())
        if active_only:
            query = query.where(User.is_active.is_(True))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_username(
        self,
        db: AsyncSession,
        username: str,
    ) -> User | None:
        """사용자명으로 사용자를 조회합니다. (Retrieve a user by username.)"""
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> User:
        """사용자를 생성합니다. (Create a user.)"""
        user: User = User(**obj_data)
        db.add(user)
        await db.flush()
        await db.refresh(user)
        return user

    async def update(
        self,
        db: AsyncSession,
        user: User,
        update_data: dict[str, Any],
    ) -> User:
        """사용자 필드를 갱신합니다.

        Update the given fields of a user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 대상 사용자 (User to update)
            update_data: 업데이트할 필드와 값 (Fields and values to update)

        Returns:
            User: 갱신된 사용자 (Updated user)
        """
        for field, value in update_data.items():
            if hasattr(user, field):
                setattr(user, field, value)
        await db.flush()
        await db.refresh(user)
        return user

    async def touch_last_login(
        self,
        db: AsyncSession,
        user: User,
        when: datetime,
    ) -> None:
        """마지막 로그인 시간을 기록합니다. (Record the last login time.)"""
        user.last_login_at = when
        await db.flush()
        await db.refresh(user)


# 싱글턴 인스턴스: Singleton instance (stateless)
user_repository: UserRepository = UserRepository()
