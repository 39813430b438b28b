"""사용자 응답 스키마.

User response schema. password_hash is deliberately absent so it can
never be serialized outward.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """사용자 응답 스키마 (비밀번호 해시 제외).

    User payload returned to clients (no password hash).
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    username: str
    display_name: str | None
    avatar_url: str | None
    notification_settings: dict[str, bool]
    is_active: bool
    email_verified: bool
    last_login_at: datetime | None
    created_at: datetime
    updated_at: datetime
