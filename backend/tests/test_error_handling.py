"""
Error Handling 테스트
에러 분류 및 포맷팅 테스트
"""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.utils.errors import (
    ErrorCategory,
    UserFriendlyError,
    ERROR_MESSAGES,
    CustomerNotFoundError,
    ResourceNotFoundError,
    classify_error,
    error_for_status,
    format_error_response,
    raise_not_found,
)


class TestErrorCategory:
    """에러 카테고리 테스트"""

    def test_error_categories_exist(self):
        for cat in ["VALIDATION", "NOT_FOUND", "CONFLICT", "DATABASE", "INTERNAL", "NETWORK", "TIMEOUT"]:
            assert hasattr(ErrorCategory, cat), f"Missing category: {cat}"

    def test_error_messages_defined(self):
        for key in ["invalid_input", "not_found", "customer_not_found", "connection_error", "duplicate_key"]:
            assert key in ERROR_MESSAGES, f"Missing error message: {key}"


class TestNotFoundErrors:

    def test_customer_not_found_is_resource_not_found(self):
        error = CustomerNotFoundError("abc")

        assert isinstance(error, ResourceNotFoundError)
        assert error.resource == "Customer"
        assert error.resource_id == "abc"
        assert str(error) == "Customer not found: abc"

    def test_raise_not_found(self):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            raise_not_found("Program", "p-1")

        assert exc_info.value.resource == "Program"


class TestClassifyError:
    """예외 분류 테스트"""

    def test_customer_not_found(self):
        error = classify_error(CustomerNotFoundError("x"))
        assert error.category == ErrorCategory.NOT_FOUND
        assert error.message_ko == "고객을 찾을 수 없습니다."

    def test_resource_not_found(self):
        error = classify_error(ResourceNotFoundError("Program", "x"))
        assert error.http_status == 404

    def test_integrity_error(self):
        error = classify_error(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))
        assert error.category == ErrorCategory.CONFLICT
        assert error.http_status == 409

    def test_operational_error(self):
        error = classify_error(OperationalError("SELECT 1", {}, Exception("server closed")))
        assert error.category == ErrorCategory.DATABASE
        assert error.retryable is True

    def test_timeout_message(self):
        error = classify_error(Exception("request timed out"))
        assert error.category == ErrorCategory.TIMEOUT

    def test_unknown_error(self):
        error = classify_error(ValueError("boom"))
        assert error.category == ErrorCategory.INTERNAL
        assert error.http_status == 500
        assert error.technical_detail == "boom"


class TestErrorForStatus:

    @pytest.mark.parametrize("status_code,category", [
        (400, ErrorCategory.VALIDATION),
        (404, ErrorCategory.NOT_FOUND),
        (409, ErrorCategory.CONFLICT),
        (418, ErrorCategory.INTERNAL),
    ])
    def test_category_from_status(self, status_code, category):
        error = error_for_status(status_code, "메시지")
        assert error.category == category
        assert error.message_ko == "메시지"
        assert error.http_status == status_code


class TestFormatErrorResponse:
    """응답 포맷 테스트"""

    def _error(self):
        return UserFriendlyError(
            category=ErrorCategory.CONFLICT,
            message_ko="이미 존재합니다.",
            message_en="Already exists.",
            suggestion_ko="다른 값을 입력해 주세요.",
            technical_detail="UNIQUE constraint failed",
            http_status=409,
        )

    def test_korean(self):
        response = format_error_response(self._error(), lang="ko")

        assert response == {
            "error": {
                "category": "conflict",
                "message": "이미 존재합니다.",
                "retryable": False,
                "suggestion": "다른 값을 입력해 주세요.",
            }
        }

    def test_english_without_suggestion(self):
        response = format_error_response(self._error(), lang="en")

        assert response["error"]["message"] == "Already exists."
        assert "suggestion" not in response["error"]

    def test_technical_detail(self):
        response = format_error_response(self._error(), include_technical=True)
        assert response["error"]["detail"] == "UNIQUE constraint failed"
