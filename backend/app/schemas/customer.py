# -*- coding: utf-8 -*-
"""
고객 관리 관련 Pydantic 스키마
"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

BusinessType = Literal["INDIVIDUAL", "CORPORATE"]

# 빈 문자열은 None으로 저장
BLANK_AS_NONE_FIELDS = ("corporate_number", "company_size", "contact_email", "contact_phone", "notes")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _clean_keywords(value):
    """쉼표 구분 문자열도 허용, 공백 항목 제거"""
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


# ========== Request 스키마 ==========


class CustomerBase(BaseModel):
    """고객 공통 필드"""
    business_number: str = Field(
        ...,
        description="사업자등록번호 (숫자 10자리)",
        pattern=r"^\d{10}$",
    )
    business_type: BusinessType = Field(..., description="사업자 유형")
    corporate_number: Optional[str] = Field(
        None,
        description="법인등록번호 (숫자 13자리)",
        pattern=r"^\d{13}$",
    )
    name: str = Field(..., min_length=1, max_length=255, description="상호명")
    industry: str = Field(..., min_length=1, max_length=100, description="업종")
    company_size: Optional[str] = Field(None, max_length=50, description="기업 규모")
    location: str = Field(..., min_length=1, max_length=100, description="소재지")
    budget: Optional[int] = Field(None, gt=0, description="예산 (원)")
    keywords: List[str] = Field(..., min_length=1, description="관심 키워드")
    contact_email: Optional[EmailStr] = Field(None, description="담당자 이메일")
    contact_phone: Optional[str] = Field(None, max_length=50, description="담당자 연락처")
    notes: Optional[str] = Field(None, description="메모")

    @field_validator(*BLANK_AS_NONE_FIELDS, mode="before")
    @classmethod
    def empty_string_as_none(cls, value):
        return _blank_to_none(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, value):
        return _clean_keywords(value)


class CustomerCreate(CustomerBase):
    """고객 생성 요청"""
    pass


class CustomerUpdate(BaseModel):
    """고객 수정 요청 (전달된 필드만 반영)"""
    business_number: Optional[str] = Field(None, pattern=r"^\d{10}$")
    business_type: Optional[BusinessType] = None
    corporate_number: Optional[str] = Field(None, pattern=r"^\d{13}$")
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    industry: Optional[str] = Field(None, min_length=1, max_length=100)
    company_size: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    budget: Optional[int] = Field(None, gt=0)
    keywords: Optional[List[str]] = Field(None, min_length=1)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None

    @field_validator(*BLANK_AS_NONE_FIELDS, mode="before")
    @classmethod
    def empty_string_as_none(cls, value):
        return _blank_to_none(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, value):
        return _clean_keywords(value)


# ========== Response 스키마 ==========


class CustomerResponse(BaseModel):
    """고객 응답"""
    id: UUID
    business_number: str
    business_type: str
    corporate_number: Optional[str] = None
    name: str
    industry: Optional[str] = None
    company_size: Optional[str] = None
    location: Optional[str] = None
    budget: Optional[int] = None
    keywords: List[str] = Field(default_factory=list)
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BulkImportRowError(BaseModel):
    """일괄 등록 실패 행"""
    row: int = Field(..., description="파일 내 행 번호 (헤더 제외, 1부터)")
    field: Optional[str] = Field(None, description="오류 필드")
    message: str = Field(..., description="오류 메시지")


class BulkImportResponse(BaseModel):
    """일괄 등록 결과"""
    imported_count: int = Field(..., description="등록된 고객 수")
    failed_count: int = Field(..., description="실패한 행 수")
    errors: List[BulkImportRowError] = Field(default_factory=list)
