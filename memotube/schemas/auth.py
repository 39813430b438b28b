"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance/refresh, token claims and
profile updates. Request bodies use camelCase keys.
"""

import re
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from memotube.schemas.common import CamelModel
from memotube.schemas.user import UserResponse

# 비밀번호 정책: (패턴, 오류 메시지) 목록 (Password policy rules)
_PASSWORD_RULES: list[tuple[str, str]] = [
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"\d", "Password must contain at least one number"),
    (r"[@$!%*?&]", "Password must contain at least one special character"),
]

_USERNAME_PATTERN: str = r"^[a-zA-Z0-9_-]+$"


class RegisterRequest(CamelModel):
    """회원가입 요청 스키마.

    Registration request schema.

    Attributes:
        email: 이메일: 소문자로 정규화 (Email, normalized to lower case)
        username: 사용자명: 3~30자, 영문/숫자/_/- (3-30 chars)
        password: 비밀번호: 8자 이상, 대/소문자, 숫자, 특수문자 포함
        display_name: 표시 이름 (Optional display name, max 100 chars)
    """

    email: EmailStr
    username: str = Field(min_length=3, max_length=30, pattern=_USERNAME_PATTERN)
    password: str = Field(min_length=8, max_length=72)
    display_name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        for pattern, message in _PASSWORD_RULES:
            if re.search(pattern, value) is None:
                raise ValueError(message)
        return value


class LoginRequest(CamelModel):
    """로그인 요청 스키마 (Login request schema)."""

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class RefreshRequest(CamelModel):
    """토큰 갱신 요청 스키마.

    Exchanges a valid refresh token for a new token pair.
    """

    refresh_token: str = Field(min_length=1)


class ProfileUpdateRequest(CamelModel):
    """프로필 수정 요청 스키마 (부분 업데이트).

    Profile update request schema (partial update).
    Only the fields sent by the client are applied.
    """

    display_name: str | None = Field(default=None, max_length=100)
    avatar_url: str | None = Field(default=None, max_length=2048)
    notification_settings: dict[str, bool] | None = None


class TokenPayload(CamelModel):
    """토큰 신원 클레임: {userId, email, username}.

    Identity claims carried by both access and refresh tokens, and the
    identity attached to an authenticated request.
    """

    user_id: str
    email: str
    username: str

    @property
    def user_uuid(self) -> UUID:
        return UUID(self.user_id)

    def to_claims(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "TokenPayload":
        return cls.model_validate(claims)


class TokenPair(CamelModel):
    """JWT 토큰 쌍 응답 스키마.

    Attributes:
        access_token: 액세스 토큰: 기본 15분 (Short-lived access token)
        refresh_token: 리프레시 토큰: 기본 30일 (Long-lived refresh token)
        expires_in: 액세스 토큰 유효 기간(초) (Access token lifetime in seconds)
    """

    access_token: str
    refresh_token: str
    expires_in: int


class AuthResult(CamelModel):
    """회원가입/로그인 결과: 사용자 + 토큰 (User plus tokens)."""

    user: UserResponse
    tokens: TokenPair
