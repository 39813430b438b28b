"""인증 서비스: 회원가입, 로그인, 토큰 갱신, 프로필 비즈니스 로직.

Auth Service: Business logic for registration, login, token refresh
and profile management. Tokens are stateless; nothing is persisted
besides the user row.
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from memotube.config import Settings
from memotube.models.user import User
from memotube.repositories.user_repository import user_repository
from memotube.schemas.auth import (
    AuthResult,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenPair,
    TokenPayload,
)
from memotube.schemas.user import UserResponse
from memotube.utils.exceptions import AuthenticationError, DuplicateError, NotFoundError
from memotube.utils.jwt import TokenService
from memotube.utils.password import hash_password, verify_password

# 로그인 실패 메시지: 이메일 미존재/비밀번호 불일치를 구분하지 않음
# (Same message for unknown email and wrong password)
_INVALID_CREDENTIALS: str = "Invalid email or password"


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.

    Attributes:
        settings: 애플리케이션 설정 (Application settings)
        tokens: 토큰 발급/검증기 (Token issuer/verifier)
    """

    def __init__(self, settings: Settings, tokens: TokenService) -> None:
        self.settings: Settings = settings
        self.tokens: TokenService = tokens
        # 미존재 이메일 로그인에도 bcrypt 비교를 수행하기 위한 해시
        # (Compared against when the email is unknown, so both paths hash)
        self._dummy_hash: str = hash_password("memotube-dummy-password", settings.BCRYPT_ROUNDS)

    def _to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다. (password_hash 제외)"""
        return UserResponse.model_validate(user)

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> AuthResult:
        """회원가입을 처리합니다.

        Register a new user and issue a token pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            AuthResult: 사용자와 토큰 (User and tokens)

        Raises:
            DuplicateError: 이메일 또는 사용자명 중복 (Email or username taken)
        """
        if await user_repository.get_by_email(db, data.email) is not None:
            raise DuplicateError("Email already registered")
        if await user_repository.get_by_username(db, data.username) is not None:
            raise DuplicateError("Username already taken")

        user: User = await user_repository.create(db, {
            "email": data.email,
            "username": data.username,
            "password_hash": hash_password(data.password, self.settings.BCRYPT_ROUNDS),
            "display_name": data.display_name,
        })
        return AuthResult(user=self._to_response(user), tokens=self.tokens.issue_token_pair(user))

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> AuthResult:
        """로그인을 처리합니다.

        Verify credentials, record the login time and issue a token pair.

        Raises:
            AuthenticationError: 잘못된 인증 정보 또는 비활성 계정
                                 (Invalid credentials or deactivated account)
        """
        user: User | None = await user_repository.get_by_email(db, data.email, active_only=True)
        if user is None:
            verify_password(data.password, self._dummy_hash)
            raise AuthenticationError(_INVALID_CREDENTIALS)
        if not verify_password(data.password, user.password_hash):
            raise AuthenticationError(_INVALID_CREDENTIALS)

        await user_repository.touch_last_login(db, user, datetime.now(timezone.utc))
        return AuthResult(user=self._to_response(user), tokens=self.tokens.issue_token_pair(user))

    async def refresh_tokens(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> TokenPair:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair from a refresh token.

        Raises:
            AuthenticationError: 유효하지 않거나 만료/위조된 토큰, 또는 사용자 없음
                                 (Invalid/expired/forged token, or user gone)
        """
        try:
            payload: TokenPayload = self.tokens.verify_refresh_token(refresh_token)
        except AuthenticationError as exc:
            raise AuthenticationError("Invalid refresh token") from exc

        user: User | None = await user_repository.get_by_id(db, payload.user_uuid)
        if user is None:
            raise AuthenticationError("User not found")
        return self.tokens.issue_token_pair(user)

    async def get_profile(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserResponse:
        """현재 사용자 프로필을 반환합니다.

        Raises:
            NotFoundError: 사용자가 없거나 비활성 (User missing or deactivated)
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return self._to_response(user)

    async def update_profile(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: ProfileUpdateRequest,
    ) -> UserResponse:
        """프로필을 수정합니다. 요청에 포함된 필드만 반영.

        Update profile fields present in the request.
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")

        update_data: dict = data.model_dump(exclude_unset=True)
        if "notification_settings" in update_data and update_data["notification_settings"] is not None:
            # 기존 설정에 병합 (Merge into the existing preferences)
            update_data["notification_settings"] = {
                **user.notification_settings,
                **update_data["notification_settings"],
            }
        elif "notification_settings" in update_data:
            del update_data["notification_settings"]

        user = await user_repository.update(db, user, update_data)
        return self._to_response(user)

    async def deactivate(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """계정을 비활성화합니다 (소프트 삭제).

        Soft-deactivate the account. Existing tokens stay valid until they
        expire, but refresh, login and profile lookups stop working.
        """
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        await user_repository.update(db, user, {"is_active": False})
