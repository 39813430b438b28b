"""FastAPI 의존성 주입 모듈: 인증 게이트와 앱 컨텍스트.

FastAPI dependency injection module: Auth gate and application context.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. extract_bearer_token()이 토큰을 추출: 없으면 401 "No token provided"
       (Token extracted; missing → 401 "No token provided")
    3. TokenService가 액세스 토큰을 검증: 실패/만료 시 401
       "Invalid or expired token" (Verification failure or expiry → 401)
    4. 신원 정보를 request.state.user에 저장하고 반환
       (Identity attached to request.state.user and returned)

The gate only verifies the token; it does not load the user row.
"""

from typing import Annotated

from fastapi import Depends, Request

from memotube.context import AppContext
from memotube.schemas.auth import TokenPayload
from memotube.utils.exceptions import AuthenticationError
from memotube.utils.jwt import extract_bearer_token


def get_context(request: Request) -> AppContext:
    """현재 앱의 컨텍스트를 반환합니다. (Context of the serving application.)"""
    return request.app.state.context


async def get_current_identity(
    request: Request,
    context: Annotated[AppContext, Depends(get_context)],
) -> TokenPayload:
    """액세스 토큰에서 현재 사용자 신원을 추출합니다.

    Require a valid access token and return its identity claims. The user
    row is not read, so a deactivated user's access token stays valid until
    it expires.

    Args:
        request: 현재 요청 (Current request)
        context: 앱 컨텍스트 (Application context)

    Returns:
        TokenPayload: 인증된 신원 {user_id, email, username}

    Raises:
        AuthenticationError: 토큰 없음, 위조, 만료 (Missing, invalid or expired token)
    """
    token: str | None = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise AuthenticationError("No token provided")
    try:
        identity: TokenPayload = context.tokens.verify_access_token(token)
    except AuthenticationError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    request.state.user = identity
    return identity


async def get_optional_identity(
    request: Request,
    context: Annotated[AppContext, Depends(get_context)],
) -> TokenPayload | None:
    """토큰이 있으면 신원을, 없거나 유효하지 않으면 None을 반환합니다.

    Optional auth: same extraction and verification, but never raises.
    """
    token: str | None = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        return None
    try:
        identity: TokenPayload = context.tokens.verify_access_token(token)
    except AuthenticationError:
        return None

    request.state.user = identity
    return identity


# 편의 타입 별칭: Annotated shortcuts used by routers
CurrentIdentity = Annotated[TokenPayload, Depends(get_current_identity)]
OptionalIdentity = Annotated[TokenPayload | None, Depends(get_optional_identity)]
Context = Annotated[AppContext, Depends(get_context)]
