# -*- coding: utf-8 -*-
"""
매칭 관련 Pydantic 스키마
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .program import ProgramResponse


class MatchingRunRequest(BaseModel):
    """매칭 실행 요청"""
    customer_id: UUID = Field(..., description="고객 ID")
    min_score: Optional[int] = Field(None, ge=0, le=100, description="최소 점수 (기본 30)")
    max_results: Optional[int] = Field(None, ge=1, le=500, description="최대 결과 수 (기본 50)")
    force_refresh: bool = Field(False, description="기존 매칭 결과 삭제 후 재계산")


class MatchingResultResponse(BaseModel):
    """매칭 결과 (프로그램 상세 포함)"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    program_id: UUID
    score: int
    matched_industry: bool
    matched_location: bool
    matched_keywords: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    program: ProgramResponse


class MatchingResponse(BaseModel):
    """매칭 결과 목록"""
    total: int
    results: List[MatchingResultResponse]
