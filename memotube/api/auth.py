"""인증 라우터: 회원가입, 로그인, 토큰 갱신, 로그아웃, 프로필.

Auth Router: Registration, login, token refresh, logout and profile
endpoints under ``/api/auth``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from memotube.api.deps import Context, CurrentIdentity
from memotube.database import get_db
from memotube.schemas.auth import (
    AuthResult,
    LoginRequest,
    ProfileUpdateRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPair,
)
from memotube.schemas.common import MessageResponse
from memotube.schemas.user import UserResponse
from memotube.utils.responses import success_response

router: APIRouter = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """회원가입: 사용자 생성 후 토큰 쌍 발급.

    Register a new account and return the user with a token pair.
    """
    result: AuthResult = await context.auth_service.register(db, data)
    await db.commit()
    return success_response(request, result)


@router.post("/login")
async def login(
    request: Request,
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """로그인: 이메일/비밀번호 검증 후 토큰 쌍 발급.

    Login endpoint. Verifies credentials and returns the user with a token pair.
    """
    result: AuthResult = await context.auth_service.login(db, data)
    await db.commit()
    return success_response(request, result)


@router.post("/refresh")
async def refresh_token(
    request: Request,
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """토큰 갱신: 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    tokens: TokenPair = await context.auth_service.refresh_tokens(db, data.refresh_token)
    return success_response(request, {"tokens": tokens})


@router.post("/logout")
async def logout(request: Request, identity: CurrentIdentity) -> dict:
    """로그아웃: 토큰은 상태가 없으므로 서버에서 폐기할 것이 없음.

    Logout endpoint. Tokens are stateless; the client discards them.
    """
    return success_response(request, MessageResponse(message="Logged out successfully"))


@router.get("/profile")
async def get_profile(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """현재 사용자 프로필 조회. (Get the current user's profile.)"""
    user: UserResponse = await context.auth_service.get_profile(db, identity.user_uuid)
    return success_response(request, {"user": user})


@router.put("/profile")
async def update_profile(
    request: Request,
    data: ProfileUpdateRequest,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """프로필 수정 (Update display name, avatar or notification settings)."""
    user: UserResponse = await context.auth_service.update_profile(db, identity.user_uuid, data)
    await db.commit()
    return success_response(request, {"user": user})


@router.delete("/profile")
async def delete_profile(
    request: Request,
    identity: CurrentIdentity,
    db: Annotated[AsyncSession, Depends(get_db)],
    context: Context,
) -> dict:
    """계정 비활성화 (Deactivate the current account)."""
    await context.auth_service.deactivate(db, identity.user_uuid)
    await db.commit()
    return success_response(request, MessageResponse(message="Account deactivated successfully"))
