# ===================================================
# Ownership AI - Prometheus Custom Metrics
# HTTP, Matching Metrics
# ===================================================

from prometheus_client import Counter, Histogram, Gauge, Summary

# ========== HTTP Request Metrics ==========

# 총 HTTP 요청 수
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"]
)

# HTTP 요청 응답 시간
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# 활성 연결 수
http_active_connections = Gauge(
    "http_active_connections",
    "Current number of active HTTP connections"
)

# 요청 크기
http_request_size_bytes = Summary(
    "http_request_size_bytes",
    "HTTP request body size in bytes",
    ["method", "endpoint"]
)

# 응답 크기
http_response_size_bytes = Summary(
    "http_response_size_bytes",
    "HTTP response body size in bytes",
    ["method", "endpoint"]
)


# ========== Matching Metrics ==========

# 매칭 실행 수
matching_runs_total = Counter(
    "matching_runs_total",
    "Total matching runs",
    ["status"]  # status: success, customer_not_found, error
)

# 매칭 실행 시간
matching_duration_seconds = Histogram(
    "matching_duration_seconds",
    "Matching run duration in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# 저장된 매칭 결과 수
matching_results_persisted_total = Counter(
    "matching_results_persisted_total",
    "Total matching results upserted"
)

# 저장 실패한 매칭 결과 수 (best-effort 저장)
matching_upsert_failures_total = Counter(
    "matching_upsert_failures_total",
    "Total matching result upserts that failed and were skipped"
)


# ========== Helper Functions ==========

def record_matching_run(status: str, duration: float = None):
    """매칭 실행 메트릭 기록"""
    matching_runs_total.labels(status=status).inc()
    if duration is not None:
        matching_duration_seconds.observe(duration)
