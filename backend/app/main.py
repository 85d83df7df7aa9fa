"""
Ownership AI Backend - FastAPI Main Application
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from prometheus_client import make_asgi_app
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

# Sentry 초기화 (가장 먼저 실행되어야 함)
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from app.config import settings

# Sentry 설정
if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"ownership-ai@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        # 고객 연락처 등 PII 전송 안 함
        send_default_pii=False,
        attach_stacktrace=True,
    )
from app.utils.errors import (
    ErrorCategory,
    ResourceNotFoundError,
    classify_error,
    error_for_status,
    format_error_response,
)
from app.database import check_db_connection, SessionLocal

# 로깅 설정
if settings.log_format == "json":
    logging.basicConfig(
        level=settings.log_level,
        format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
    )
else:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    앱 시작/종료 시 실행되는 이벤트
    - 시작: 테이블 생성, 샘플 프로그램 시딩
    """
    # Startup
    logger.info("Starting Ownership AI Backend...")

    try:
        from app.init_db import init_database

        db = SessionLocal()
        try:
            init_database(db)
        finally:
            db.close()

        logger.info("Database initialized successfully")
    except Exception as e:
        logger.warning(f"Database initialization skipped: {e}")

    yield

    # Shutdown
    logger.info("Shutting down Ownership AI Backend...")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="컨설팅 CRM - 고객 관리 및 정부지원사업 매칭",
    lifespan=lifespan,
)

# ========== 미들웨어 설정 (등록 역순으로 실행됨 - 나중에 추가된 것이 먼저 실행) ==========

# 1. Metrics 미들웨어 (가장 나중에 실행 - 모든 요청 측정)
METRICS_ENABLED = os.getenv("METRICS_ENABLED", "true").lower() == "true"
if METRICS_ENABLED:
    from app.middleware.metrics import MetricsMiddleware

    app.add_middleware(MetricsMiddleware)
    logger.info("Metrics middleware enabled")

# 2. Security Headers 미들웨어
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
if SECURITY_HEADERS_ENABLED:
    from app.middleware.security_headers import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    logger.info("Security Headers middleware enabled")

# 3. CORS 미들웨어 (가장 마지막에 추가 → 가장 먼저 실행됨)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info(f"CORS middleware enabled for origins: {settings.cors_origins_list}")

# Prometheus 메트릭 엔드포인트
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


# ========== 전역 예외 핸들러 ==========


def request_language(request: Request) -> str:
    """Accept-Language 헤더에서 응답 언어 결정 (기본 ko)"""
    lang = request.headers.get("Accept-Language", "ko")
    return "ko" if "ko" in lang else "en"


def add_cors_headers(response: JSONResponse, request: Request) -> JSONResponse:
    """
    예외 응답에 CORS 헤더를 추가합니다.

    CORSMiddleware가 예외 핸들러의 응답에 CORS 헤더를 추가하지 못하는 경우가 있어
    모든 에러 응답에도 CORS 헤더를 수동으로 추가합니다.
    """
    origin = request.headers.get("origin", "")
    if origin and origin in settings.cors_origins_list:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"
    return response


@app.exception_handler(ResourceNotFoundError)
async def not_found_exception_handler(request: Request, exc: ResourceNotFoundError):
    """리소스 없음 → 404"""
    user_error = classify_error(exc)
    response = JSONResponse(
        status_code=404,
        content=format_error_response(user_error, lang=request_language(request)),
    )
    return add_cors_headers(response, request)


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    """DB 제약조건 위반 (중복 키 등) → 409"""
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    user_error = classify_error(exc)
    response = JSONResponse(
        status_code=user_error.http_status,
        content=format_error_response(user_error, lang=request_language(request)),
    )
    return add_cors_headers(response, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP 예외 핸들러 - 라우터 메시지 유지, 카테고리는 상태 코드로 결정"""
    # HTTPException의 detail이 이미 dict인 경우 그대로 반환
    if isinstance(exc.detail, dict):
        response = JSONResponse(status_code=exc.status_code, content=exc.detail)
        return add_cors_headers(response, request)

    user_error = error_for_status(exc.status_code, str(exc.detail))
    response = JSONResponse(
        status_code=exc.status_code,
        content=format_error_response(user_error, lang=request_language(request)),
        headers=getattr(exc, "headers", None),
    )
    return add_cors_headers(response, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Pydantic 유효성 검사 에러 핸들러"""
    lang = request_language(request)

    # 에러 상세 정보 추출
    error_details = []
    for error in exc.errors():
        loc = " -> ".join(str(part) for part in error["loc"])
        error_details.append(f"{loc}: {error['msg']}")

    if lang == "ko":
        message = "입력 데이터가 올바르지 않습니다."
        suggestion = "요청 데이터를 확인해 주세요."
    else:
        message = "Invalid input data."
        suggestion = "Please check your request data."

    response = JSONResponse(
        status_code=422,
        content={
            "error": {
                "category": ErrorCategory.VALIDATION.value,
                "message": message,
                "suggestion": suggestion,
                "details": error_details,
                "retryable": False,
            }
        },
    )
    return add_cors_headers(response, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러 - 예상치 못한 에러 처리"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    user_error = classify_error(exc)
    response = JSONResponse(
        status_code=user_error.http_status,
        content=format_error_response(
            user_error,
            lang=request_language(request),
            include_technical=settings.environment == "development",
        ),
    )
    return add_cors_headers(response, request)


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "ok",
    }


@app.get("/health")
async def health_check():
    """헬스 체크 엔드포인트"""
    db_status = "ok" if check_db_connection() else "error"

    return {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "checks": {
            "database": db_status,
        }
    }


@app.get("/api/v1/info")
async def api_info():
    """API 정보"""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "matching": {
            "min_score": settings.matching_min_score,
            "max_results": settings.matching_max_results,
        },
    }


# ========== 라우터 등록 ==========
from app.routers import analytics, customers, matching, programs, projects, watchlist

app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])
app.include_router(watchlist.router, prefix="/api/v1/customers", tags=["watchlist"])
app.include_router(projects.router, prefix="/api/v1/customers", tags=["projects"])
app.include_router(programs.router, prefix="/api/v1/programs", tags=["programs"])
app.include_router(matching.router, prefix="/api/v1/matching", tags=["matching"])
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
