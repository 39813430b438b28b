"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.
Issues access/refresh token pairs and verifies them, telling an expired
token apart from a forged or malformed one.

JWT Payload Structure:
    액세스/리프레시 토큰 모두 동일한 기본 페이로드를 사용합니다.
    Both access and refresh tokens share the same identity claims:
    {
        "userId": "user_uuid",      # 사용자 ID (User identifier)
        "email": "a@b.com",         # 이메일 (User email)
        "username": "alice",        # 사용자명 (Username)
        "iat": 1234567000,          # 발급 시간 (Issued at)
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "jti": "hex",               # 토큰 고유 ID (Unique token id)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }

    액세스 토큰과 리프레시 토큰은 서로 다른 비밀키로 서명되므로
    한쪽 토큰을 다른 쪽 검증기에 넣으면 서명 검증에서 실패합니다.
    (Access and refresh tokens use distinct secrets, so one kind never
    verifies as the other.)
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from memotube.config import Settings
from memotube.schemas.auth import TokenPair, TokenPayload
from memotube.utils.exceptions import AuthenticationError, TokenExpiredError

# Authorization 헤더 접두사: 대소문자 구분 (Case-sensitive header prefix)
BEARER_PREFIX: str = "Bearer "


def extract_bearer_token(auth_header: str | None) -> str | None:
    """Authorization 헤더에서 Bearer 토큰을 추출합니다.

    Return the token from an ``Authorization: Bearer <token>`` header.
    Only the exact, case-sensitive ``"Bearer "`` prefix is accepted.
    Never raises.

    Args:
        auth_header: Authorization 헤더 값 (Header value, may be None)

    Returns:
        str | None: 토큰 문자열 또는 None (Token, or None if missing/malformed)

    Example:
        extract_bearer_token("Bearer abc123")  # "abc123"
        extract_bearer_token("abc123")         # None
    """
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token: str = auth_header[len(BEARER_PREFIX):]
    return token or None


class TokenService:
    """액세스/리프레시 토큰 발급 및 검증기.

    Issues and verifies signed token pairs. Constructed with explicit
    Settings; holds no other state, so verification is pure given the
    token and the secrets.

    Attributes:
        settings: 애플리케이션 설정 (Application settings)
    """

    def __init__(self, settings: Settings) -> None:
        self.settings: Settings = settings

    @property
    def access_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    @property
    def refresh_ttl(self) -> timedelta:
        return timedelta(days=self.settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)

    def _sign(self, identity: TokenPayload, token_type: str, secret: str, ttl: timedelta) -> str:
        """페이로드에 발급/만료 시간을 추가하고 서명합니다.

        Add iat/exp/jti/type claims to the identity claims and sign them.
        """
        now: datetime = datetime.now(timezone.utc)
        to_encode: dict[str, Any] = identity.to_claims()
        to_encode.update({
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
            "type": token_type,
        })
        return jwt.encode(to_encode, secret, algorithm=self.settings.JWT_ALGORITHM)

    def _expires_in(self, access_token: str) -> int:
        """서명된 액세스 토큰에서 유효 기간(초)을 읽어옵니다.

        Read ``exp - iat`` back from the freshly signed access token.
        Falls back to the configured TTL when either claim is absent.
        """
        claims: dict[str, Any] = jwt.decode(access_token, options={"verify_signature": False})
        issued_at = claims.get("iat")
        expires_at = claims.get("exp")
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            return int(self.access_ttl.total_seconds())
        return expires_at - issued_at

    def issue_token_pair(self, user: Any) -> TokenPair:
        """사용자에 대한 액세스/리프레시 토큰 쌍을 발급합니다.

        Issue an access/refresh token pair for a user.

        Args:
            user: id, email, username 속성을 가진 사용자 (User-like object)

        Returns:
            TokenPair: 토큰 쌍과 액세스 토큰 유효 기간(초)
                       (Token pair plus access token lifetime in seconds)
        """
        identity: TokenPayload = TokenPayload(
            user_id=str(user.id),
            email=user.email,
            username=user.username,
        )
        access_token: str = self._sign(
            identity, "access", self.settings.JWT_ACCESS_SECRET, self.access_ttl
        )
        refresh_token: str = self._sign(
            identity, "refresh", self.settings.JWT_REFRESH_SECRET, self.refresh_ttl
        )
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._expires_in(access_token),
        )

    def _verify(self, token: str, token_type: str, secret: str) -> TokenPayload:
        """토큰 서명, 만료, 유형을 검증하고 신원 정보를 반환합니다.

        Raises:
            TokenExpiredError: 서명은 유효하나 만료됨 (Valid signature, expired)
            AuthenticationError: 그 외 모든 검증 실패 (Any other failure)
        """
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.JWT_ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Invalid token") from exc

        if claims.get("type") != token_type:
            raise AuthenticationError("Invalid token type")
        try:
            payload: TokenPayload = TokenPayload.from_claims(claims)
            payload.user_uuid  # userId must be a UUID
        except (KeyError, ValueError) as exc:
            raise AuthenticationError("Invalid token payload") from exc
        return payload

    def verify_access_token(self, token: str) -> TokenPayload:
        """액세스 토큰을 검증합니다. (Verify an access token.)"""
        return self._verify(token, "access", self.settings.JWT_ACCESS_SECRET)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """리프레시 토큰을 검증합니다. (Verify a refresh token.)"""
        return self._verify(token, "refresh", self.settings.JWT_REFRESH_SECRET)
