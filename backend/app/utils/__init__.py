"""
유틸리티 모듈
"""
from .errors import (
    ErrorCategory,
    ResourceNotFoundError,
    CustomerNotFoundError,
    classify_error,
    format_error_response,
    raise_not_found,
)

__all__ = [
    "ErrorCategory",
    "ResourceNotFoundError",
    "CustomerNotFoundError",
    "classify_error",
    "format_error_response",
    "raise_not_found",
]
