"""
보안 헤더 미들웨어
OWASP 권장 보안 헤더 설정
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 고객 개인정보(연락처, 사업자번호)를 반환하는 경로
SENSITIVE_PATH_PREFIXES = ("/api/v1/customers",)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    보안 헤더 미들웨어

    추가되는 헤더:
    - X-Content-Type-Options, X-Frame-Options, Referrer-Policy
    - Strict-Transport-Security (Production만)
    - Cache-Control: 고객 정보 API 캐싱 금지
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        if request.url.path.startswith(SENSITIVE_PATH_PREFIXES):
            response.headers["Cache-Control"] = "no-store, private"
            response.headers["Pragma"] = "no-cache"

        return response
