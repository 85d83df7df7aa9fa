# ===================================================
# Ownership AI - Metrics Collection Middleware
# Prometheus HTTP 메트릭 자동 수집
# ===================================================

import re
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.utils.metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_active_connections,
    http_request_size_bytes,
    http_response_size_bytes,
)


# 메트릭 수집 제외 경로
EXCLUDE_PATHS = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
}

_UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def normalize_endpoint(path: str) -> str:
    """
    엔드포인트 정규화 (레이블 카디널리티 제어)

    예: /api/v1/customers/<uuid>/watchlist -> /api/v1/customers/{id}/watchlist
    """
    parts = [part for part in path.split("/") if part]
    normalized = [
        "{id}" if _UUID_PATTERN.match(part) or part.isdigit() else part
        for part in parts
    ]
    return "/" + "/".join(normalized) if normalized else "/"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    HTTP 요청/응답 메트릭 수집 미들웨어

    수집 항목:
    - 요청 수 (method, endpoint, status_code)
    - 응답 시간 (method, endpoint)
    - 활성 연결 수
    - 요청/응답 크기
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        path = request.url.path
        if path in EXCLUDE_PATHS or path.startswith("/metrics"):
            return await call_next(request)

        endpoint = normalize_endpoint(path)
        method = request.method

        http_active_connections.inc()

        content_length = request.headers.get("content-length")
        if content_length:
            http_request_size_bytes.labels(
                method=method, endpoint=endpoint
            ).observe(int(content_length))

        start_time = time.perf_counter()
        status_code = "500"

        try:
            response = await call_next(request)
            status_code = str(response.status_code)

            response_size = response.headers.get("content-length")
            if response_size:
                http_response_size_bytes.labels(
                    method=method, endpoint=endpoint
                ).observe(int(response_size))

            return response

        finally:
            # 에러 발생 시에도 기록 (status_code 기본값 500)
            http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(time.perf_counter() - start_time)
            http_requests_total.labels(
                method=method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_active_connections.dec()
