"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.

Tables:
    - users: 사용자 계정 (User accounts)
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from memotube.database import Base


def _default_notification_settings() -> dict[str, bool]:
    return {"email": True, "push": True, "reminder": True}


class User(Base):
    """사용자 모델: 시스템 사용자 계정 정보.

    User model: System user account information.
    Email is stored lower-cased and is globally unique, as is username.
    Deactivated users are kept (is_active=False) rather than deleted.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 이메일 (Email address, unique, lower-cased)
        username: 사용자명 (Username, unique)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        display_name: 표시 이름 (Display name, optional)
        avatar_url: 아바타 URL (Avatar image URL, optional)
        notification_settings: 알림 설정 (Notification preferences)
        is_active: 활성 상태 (Active status, soft-delete pattern)
        email_verified: 이메일 인증 여부 (Email verification status)
        last_login_at: 마지막 로그인 일시 (Last successful login)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        videos / memos / tasks: 소유 리소스 (Owned resources, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자: User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 이메일: 전역 고유, 소문자 정규화 (Globally unique, normalized)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    # 사용자명: 전역 고유 (Globally unique username)
    username: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    # 비밀번호 해시: bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    notification_settings: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=_default_notification_settings
    )
    # 활성 상태: Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 이메일 인증 여부: Whether email has been verified
    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시: Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시: Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계: Relationships
    videos = relationship("Video", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    memos = relationship("Memo", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
