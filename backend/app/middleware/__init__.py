"""
미들웨어 모듈
"""
from .security_headers import SecurityHeadersMiddleware
from .metrics import MetricsMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "MetricsMiddleware",
]
