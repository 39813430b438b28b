"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Every domain failure is one of the AppError subclasses below, each carrying
a fixed HTTP status and an error code from the API taxonomy:

    VALIDATION_ERROR       422
    AUTHENTICATION_FAILED  401
    TOKEN_EXPIRED          401
    RESOURCE_NOT_FOUND     404
    ACCESS_DENIED          403
    DUPLICATE_RESOURCE     409
    INTERNAL_ERROR         500

The exception handlers in ``memotube.main`` turn them into the error
envelope; services and repositories only raise.

Usage:
    from memotube.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Memo not found")
    raise DuplicateError("Email already registered")
"""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """모든 도메인 예외의 베이스 클래스.

    Base class for typed API failures. Subclasses pin ``status_code`` and
    ``code``; callers provide the message and optional per-field details.

    Args:
        message: 클라이언트에 노출되는 메시지 (Client-facing message)
        details: 추가 상세 정보 (Optional structured details)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any | None = None) -> None:
        self.message: str = message or self.default_message
        self.details: Any | None = details
        super().__init__(status_code=type(self).status_code, detail=self.message)


class ValidationFailedError(AppError):
    """422 Validation Error: 입력 형식/범위 오류."""

    status_code = 422
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class AuthenticationError(AppError):
    """401 Unauthorized 예외: 인증 실패 시 사용.

    Raised when credentials or tokens are missing, invalid or forged.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_FAILED"
    default_message = "Authentication required"


class TokenExpiredError(AuthenticationError):
    """401: 서명은 유효하지만 만료된 토큰.

    Token with a valid signature whose ``exp`` has passed. Subclasses
    AuthenticationError so callers that only care about "not authenticated"
    can catch both.
    """

    code = "TOKEN_EXPIRED"
    default_message = "Token has expired"


class NotFoundError(AppError):
    """404 Not Found 예외: 리소스가 없거나 요청자 소유가 아닐 때 사용.

    Raised when a record does not exist or belongs to another user.
    Both cases share this error so existence is never disclosed.
    """

    status_code = status.HTTP_404_NOT_FOUND
    code = "RESOURCE_NOT_FOUND"
    default_message = "Resource not found"


class AccessDeniedError(AppError):
    """403 Forbidden 예외: 존재를 숨길 필요가 없는 권한 부족."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"
    default_message = "Access denied"


class DuplicateError(AppError):
    """409 Conflict 예외: 중복 리소스 생성 시도 시 사용.

    Raised when a uniqueness constraint would be violated
    (e.g. duplicate email or username).
    """

    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_RESOURCE"
    default_message = "Resource already exists"


class InternalError(AppError):
    """500: 처리되지 않은 오류. 메시지는 내부 정보를 노출하지 않음."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"
