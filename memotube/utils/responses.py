"""응답 엔벨로프 유틸리티 모듈.

Response envelope helpers. Every API response is wrapped:

    성공 (success): {"success": true, "data": ..., "meta": {"timestamp", "version"}}
    실패 (failure): {"success": false,
                    "error": {"code", "message", "details"?},
                    "meta": {"timestamp", "request_id"}}
"""

from datetime import datetime, timezone
from typing import Any

from starlette.requests import Request

# 요청 ID 헤더: 없으면 "unknown" (Request id header; "unknown" when absent)
REQUEST_ID_HEADER: str = "X-Request-ID"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def request_id(request: Request) -> str:
    return request.headers.get(REQUEST_ID_HEADER) or "unknown"


def success_response(request: Request, data: Any) -> dict[str, Any]:
    """성공 엔벨로프를 만듭니다.

    Wrap a payload in the success envelope. ``data`` may hold Pydantic
    models; FastAPI encodes them (by alias) when serializing the dict.

    Args:
        request: 현재 요청 (Current request, for the app version)
        data: 응답 데이터 (Payload)

    Returns:
        dict: 성공 엔벨로프 (Success envelope)
    """
    return {
        "success": True,
        "data": data,
        "meta": {
            "timestamp": _timestamp(),
            "version": request.app.state.context.settings.API_VERSION,
        },
    }


def error_response(
    request: Request,
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    """실패 엔벨로프를 만듭니다. (Build the error envelope.)"""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {
        "success": False,
        "error": error,
        "meta": {
            "timestamp": _timestamp(),
            "request_id": request_id(request),
        },
    }
