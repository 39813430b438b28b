"""FastAPI 애플리케이션 엔트리포인트: 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point: Middleware, exception handlers and
router registration. ``create_app`` builds a fully isolated application
(its own engine, token service and services) from explicit Settings.

Run:
    uvicorn memotube.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from memotube.api import auth, memos, tasks, videos
from memotube.api.deps import OptionalIdentity
from memotube.config import Settings
from memotube.context import AppContext, build_context
from memotube.middleware.axiom_logging import AxiomLoggingMiddleware
from memotube.utils.exceptions import AppError
from memotube.utils.responses import error_response, request_id, success_response

logger = logging.getLogger(__name__)

# 라우팅 단계의 HTTP 오류를 분류 체계 코드로 매핑 (Framework HTTP errors → taxonomy codes)
_HTTP_STATUS_CODES: dict[int, str] = {
    401: "AUTHENTICATION_FAILED",
    403: "ACCESS_DENIED",
    404: "RESOURCE_NOT_FOUND",
    409: "DUPLICATE_RESOURCE",
    422: "VALIDATION_ERROR",
}


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """검증 오류를 [{field, message}] 목록으로 변환합니다.

    Flatten Pydantic errors; the location prefix (body/query/path) is dropped.
    """
    details: list[dict[str, str]] = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        details.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """에러 엔벨로프를 생성하는 예외 처리기를 등록합니다.

    Register handlers rendering every failure as the error envelope.
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=error_response(
                request, "VALIDATION_ERROR", "Validation failed", _validation_details(exc)
            ),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.info("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=409,
            content=error_response(request, "DUPLICATE_RESOURCE", "Resource already exists"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code: str = _HTTP_STATUS_CODES.get(exc.status_code, "INTERNAL_ERROR")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(request, code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s (request_id=%s)",
            request.method,
            request.url.path,
            request_id(request),
        )
        return JSONResponse(
            status_code=500,
            content=error_response(request, "INTERNAL_ERROR", "Internal server error"),
        )


def create_app(
    settings: Settings | None = None,
    youtube_transport: httpx.AsyncBaseTransport | None = None,
    axiom_client: Any | None = None,
) -> FastAPI:
    """애플리케이션을 생성합니다.

    Build the FastAPI application.

    Args:
        settings: 애플리케이션 설정, None이면 환경 변수에서 로드
                  (Settings; loaded from the environment when None)
        youtube_transport: YouTube API용 httpx 전송 계층 (Transport override for tests)
        axiom_client: Axiom 클라이언트 대체 (Axiom client override for tests)

    Returns:
        FastAPI: 구성된 애플리케이션 (Configured application)
    """
    settings = settings or Settings()
    _configure_logging(settings)
    context: AppContext = build_context(settings, youtube_transport)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("%s %s starting", settings.APP_NAME, settings.API_VERSION)
        yield
        await context.dispose()

    app: FastAPI = FastAPI(
        title=settings.APP_NAME,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = context

    # Axiom API 로깅 미들웨어: CORS보다 먼저 등록하여 모든 요청을 캡처
    # (Registered before CORS to capture all requests)
    app.add_middleware(AxiomLoggingMiddleware, settings=settings, client=axiom_client)

    # CORS 미들웨어: Cross-Origin Resource Sharing middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check(request: Request, identity: OptionalIdentity) -> dict:
        """서버 상태 확인 엔드포인트.

        Health check endpoint. Reports whether a presented access token is valid.
        """
        return success_response(request, {"status": "ok", "authenticated": identity is not None})

    # 라우터 등록: Router registration
    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(videos.router, prefix="/api/videos", tags=["Videos"])
    app.include_router(memos.router, prefix="/api/memos", tags=["Memos"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])

    return app


app: FastAPI = create_app()
