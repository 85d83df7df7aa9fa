# -*- coding: utf-8 -*-
"""
정부지원사업 프로그램 Pydantic 스키마
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProgramCreate(BaseModel):
    """프로그램 등록 요청"""
    data_source: str = Field(..., min_length=1, max_length=100, description="데이터 출처")
    source_api_id: str = Field(..., min_length=1, max_length=255, description="출처 원본 ID")
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_audience: List[str] = Field(default_factory=list, description="대상 업종 (전체 = 모든 업종)")
    target_location: List[str] = Field(default_factory=list, description="대상 지역 (전국 = 모든 지역)")
    keywords: List[str] = Field(default_factory=list)
    budget_range: Optional[str] = Field(None, max_length=255)
    deadline: Optional[datetime] = None
    source_url: Optional[str] = Field(None, max_length=1000)
    attachment_url: Optional[str] = Field(None, max_length=1000)
    raw_data: Optional[Dict[str, Any]] = None
    registered_at: Optional[datetime] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sync_status: str = Field("active", pattern="^(active|archived|deleted)$")


class ProgramUpdate(BaseModel):
    """프로그램 수정 요청"""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)
    target_audience: Optional[List[str]] = None
    target_location: Optional[List[str]] = None
    keywords: Optional[List[str]] = None
    budget_range: Optional[str] = Field(None, max_length=255)
    deadline: Optional[datetime] = None
    source_url: Optional[str] = Field(None, max_length=1000)
    attachment_url: Optional[str] = Field(None, max_length=1000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sync_status: Optional[str] = Field(None, pattern="^(active|archived|deleted)$")


class ProgramResponse(BaseModel):
    """프로그램 응답"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    data_source: str
    source_api_id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    target_audience: List[str] = Field(default_factory=list)
    target_location: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    budget_range: Optional[str] = None
    deadline: Optional[datetime] = None
    source_url: Optional[str] = None
    attachment_url: Optional[str] = None
    registered_at: datetime
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    sync_status: str
    created_at: datetime
    updated_at: datetime


class ProgramListResponse(BaseModel):
    """프로그램 목록 응답"""
    items: List[ProgramResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    source_distribution: Dict[str, int] = Field(
        default_factory=dict,
        description="현재 페이지의 데이터 출처별 건수",
    )
