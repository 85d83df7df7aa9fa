"""
Ownership AI - 에러 유틸리티
사용자 친화적 에러 메시지 및 에러 분류
"""
import logging
from enum import Enum
from typing import Optional, Dict, Any
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, OperationalError

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """에러 카테고리"""
    VALIDATION = "validation"        # 입력 검증 실패
    NOT_FOUND = "not_found"          # 리소스 없음
    CONFLICT = "conflict"            # 충돌 (중복 등)
    DATABASE = "database"            # DB 오류
    INTERNAL = "internal"            # 내부 서버 오류
    NETWORK = "network"              # 네트워크 오류
    TIMEOUT = "timeout"              # 타임아웃


class ResourceNotFoundError(LookupError):
    """요청한 리소스가 존재하지 않음"""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found: {resource_id}")


class CustomerNotFoundError(ResourceNotFoundError):
    """매칭 대상 고객이 존재하지 않음"""

    def __init__(self, customer_id: str):
        super().__init__("Customer", customer_id)


def raise_not_found(resource: str, resource_id: str) -> None:
    """ResourceNotFoundError 발생 (전역 핸들러에서 404로 변환)"""
    raise ResourceNotFoundError(resource, resource_id)


@dataclass
class UserFriendlyError:
    """사용자 친화적 에러"""
    category: ErrorCategory
    message_ko: str
    message_en: str
    suggestion_ko: Optional[str] = None
    suggestion_en: Optional[str] = None
    technical_detail: Optional[str] = None
    http_status: int = 500
    retryable: bool = False


# 에러 메시지 매핑
ERROR_MESSAGES: Dict[str, UserFriendlyError] = {
    "invalid_input": UserFriendlyError(
        category=ErrorCategory.VALIDATION,
        message_ko="입력값이 올바르지 않습니다.",
        message_en="Invalid input.",
        suggestion_ko="입력 내용을 확인해 주세요.",
        suggestion_en="Please check your input.",
        http_status=400,
        retryable=False,
    ),
    "not_found": UserFriendlyError(
        category=ErrorCategory.NOT_FOUND,
        message_ko="요청하신 정보를 찾을 수 없습니다.",
        message_en="The requested resource was not found.",
        http_status=404,
        retryable=False,
    ),
    "customer_not_found": UserFriendlyError(
        category=ErrorCategory.NOT_FOUND,
        message_ko="고객을 찾을 수 없습니다.",
        message_en="Customer not found.",
        suggestion_ko="고객 ID를 확인해 주세요.",
        suggestion_en="Please check the customer ID.",
        http_status=404,
        retryable=False,
    ),

    # 데이터베이스 에러
    "connection_error": UserFriendlyError(
        category=ErrorCategory.DATABASE,
        message_ko="데이터베이스 연결에 실패했습니다.",
        message_en="Database connection failed.",
        suggestion_ko="잠시 후 다시 시도해 주세요.",
        suggestion_en="Please try again in a moment.",
        http_status=503,
        retryable=True,
    ),
    "duplicate_key": UserFriendlyError(
        category=ErrorCategory.CONFLICT,
        message_ko="이미 존재하는 데이터입니다.",
        message_en="Data already exists.",
        suggestion_ko="다른 값을 입력해 주세요.",
        suggestion_en="Please enter a different value.",
        http_status=409,
        retryable=False,
    ),

    # 네트워크 에러
    "timeout": UserFriendlyError(
        category=ErrorCategory.TIMEOUT,
        message_ko="처리 시간이 초과되었습니다.",
        message_en="Processing timeout.",
        suggestion_ko="잠시 후 다시 시도해 주세요.",
        suggestion_en="Please try again in a moment.",
        http_status=504,
        retryable=True,
    ),
    "network_error": UserFriendlyError(
        category=ErrorCategory.NETWORK,
        message_ko="네트워크 연결에 문제가 있습니다.",
        message_en="Network connection error.",
        suggestion_ko="인터넷 연결을 확인해 주세요.",
        suggestion_en="Please check your internet connection.",
        http_status=503,
        retryable=True,
    ),
}

# HTTP 상태 코드 → 에러 카테고리
STATUS_CATEGORIES: Dict[int, ErrorCategory] = {
    400: ErrorCategory.VALIDATION,
    404: ErrorCategory.NOT_FOUND,
    409: ErrorCategory.CONFLICT,
    422: ErrorCategory.VALIDATION,
    503: ErrorCategory.DATABASE,
    504: ErrorCategory.TIMEOUT,
}


def classify_error(exception: Exception) -> UserFriendlyError:
    """
    예외를 분류하여 사용자 친화적 에러로 변환

    Args:
        exception: 발생한 예외

    Returns:
        UserFriendlyError
    """
    if isinstance(exception, CustomerNotFoundError):
        return ERROR_MESSAGES["customer_not_found"]
    if isinstance(exception, ResourceNotFoundError):
        return ERROR_MESSAGES["not_found"]
    if isinstance(exception, IntegrityError):
        return ERROR_MESSAGES["duplicate_key"]
    if isinstance(exception, OperationalError):
        return ERROR_MESSAGES["connection_error"]

    error_str = str(exception).lower()
    error_type = type(exception).__name__.lower()

    # DB 에러
    if "connection" in error_str and ("refused" in error_str or "failed" in error_str):
        return ERROR_MESSAGES["connection_error"]
    if "duplicate" in error_str or "unique" in error_str:
        return ERROR_MESSAGES["duplicate_key"]

    # 네트워크 에러
    if "timeout" in error_str or "timed out" in error_str:
        return ERROR_MESSAGES["timeout"]
    if "connectionerror" in error_type or "networkerror" in error_type:
        return ERROR_MESSAGES["network_error"]

    # 기본 에러
    return UserFriendlyError(
        category=ErrorCategory.INTERNAL,
        message_ko="예기치 않은 오류가 발생했습니다.",
        message_en="An unexpected error occurred.",
        suggestion_ko="문제가 지속되면 관리자에게 문의하세요.",
        suggestion_en="If the problem persists, please contact the administrator.",
        technical_detail=str(exception),
        http_status=500,
        retryable=False,
    )


def error_for_status(status_code: int, message: str) -> UserFriendlyError:
    """
    HTTPException을 사용자 친화적 에러로 변환

    라우터에서 작성한 메시지를 그대로 사용하고, 카테고리는 상태 코드로 결정
    """
    category = STATUS_CATEGORIES.get(status_code, ErrorCategory.INTERNAL)
    return UserFriendlyError(
        category=category,
        message_ko=message,
        message_en=message,
        http_status=status_code,
        retryable=status_code in (503, 504),
    )


def format_error_response(
    error: UserFriendlyError,
    lang: str = "ko",
    include_technical: bool = False,
) -> Dict[str, Any]:
    """
    에러를 API 응답 형식으로 포맷

    Args:
        error: UserFriendlyError
        lang: 언어 (ko 또는 en)
        include_technical: 기술적 세부사항 포함 여부

    Returns:
        에러 응답 딕셔너리
    """
    is_korean = lang.lower().startswith("ko")

    response = {
        "error": {
            "category": error.category.value,
            "message": error.message_ko if is_korean else error.message_en,
            "retryable": error.retryable,
        }
    }

    suggestion = error.suggestion_ko if is_korean else error.suggestion_en
    if suggestion:
        response["error"]["suggestion"] = suggestion

    if include_technical and error.technical_detail:
        response["error"]["detail"] = error.technical_detail

    return response
