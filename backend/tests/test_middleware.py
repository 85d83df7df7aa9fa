"""
미들웨어 테스트
메트릭 수집 및 보안 헤더 미들웨어 테스트
"""
from unittest.mock import patch
from uuid import uuid4

from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.middleware.metrics import MetricsMiddleware, normalize_endpoint
from app.middleware.security_headers import SecurityHeadersMiddleware
from app.utils.metrics import http_requests_total


def _app_with(middleware) -> FastAPI:
    test_app = FastAPI()
    test_app.add_middleware(middleware)

    @test_app.get("/api/v1/customers/{customer_id}")
    def customer(customer_id: str):
        return {"id": customer_id}

    @test_app.get("/api/v1/programs")
    def programs():
        return []

    @test_app.get("/health")
    def health():
        return {"status": "healthy"}

    return test_app


class TestNormalizeEndpoint:

    def test_uuid_segments(self):
        customer_id = uuid4()
        assert normalize_endpoint(f"/api/v1/customers/{customer_id}/watchlist") == (
            "/api/v1/customers/{id}/watchlist"
        )

    def test_numeric_segments(self):
        assert normalize_endpoint("/api/v1/programs/123") == "/api/v1/programs/{id}"

    def test_plain_path(self):
        assert normalize_endpoint("/api/v1/programs") == "/api/v1/programs"
        assert normalize_endpoint("/") == "/"


class TestMetricsMiddleware:

    def test_counts_requests_by_normalized_endpoint(self):
        client = TestClient(_app_with(MetricsMiddleware))
        labels = {"method": "GET", "endpoint": "/api/v1/customers/{id}", "status_code": "200"}
        before = http_requests_total.labels(**labels)._value.get()

        client.get(f"/api/v1/customers/{uuid4()}")
        client.get(f"/api/v1/customers/{uuid4()}")

        assert http_requests_total.labels(**labels)._value.get() == before + 2

    def test_excluded_paths_not_counted(self):
        client = TestClient(_app_with(MetricsMiddleware))
        labels = {"method": "GET", "endpoint": "/health", "status_code": "200"}
        before = http_requests_total.labels(**labels)._value.get()

        client.get("/health")

        assert http_requests_total.labels(**labels)._value.get() == before


class TestSecurityHeadersMiddleware:

    def test_default_headers(self):
        client = TestClient(_app_with(SecurityHeadersMiddleware))
        response = client.get("/api/v1/programs")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert "Strict-Transport-Security" not in response.headers
        assert "Cache-Control" not in response.headers

    def test_customer_data_not_cached(self):
        client = TestClient(_app_with(SecurityHeadersMiddleware))
        response = client.get(f"/api/v1/customers/{uuid4()}")

        assert response.headers["Cache-Control"] == "no-store, private"
        assert response.headers["Pragma"] == "no-cache"

    def test_hsts_in_production(self):
        client = TestClient(_app_with(SecurityHeadersMiddleware))

        with patch("app.middleware.security_headers.settings") as mock_settings:
            mock_settings.environment = "production"
            response = client.get("/api/v1/programs")

        assert response.headers["Strict-Transport-Security"].startswith("max-age=")
