# -*- coding: utf-8 -*-
"""
고객 진행사업 스키마
"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .program import ProgramResponse

ProjectStatus = Literal[
    "preparing", "submitted", "reviewing", "selected", "rejected", "cancelled", "completed"
]


class ProjectCreateRequest(BaseModel):
    """관심 프로그램을 진행사업으로 전환"""
    program_id: UUID
    notes: Optional[str] = Field(None, max_length=2000)


class ProjectUpdateRequest(BaseModel):
    """진행사업 상태/메모/일정 수정 (전달된 필드만 반영)"""
    status: Optional[ProjectStatus] = None
    notes: Optional[str] = Field(None, max_length=2000)
    submitted_at: Optional[datetime] = None
    result_at: Optional[datetime] = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    customer_id: UUID
    program_id: UUID
    status: ProjectStatus
    notes: Optional[str] = None
    started_at: datetime
    submitted_at: Optional[datetime] = None
    result_at: Optional[datetime] = None
    updated_at: datetime
    program: ProgramResponse


class ProjectListResponse(BaseModel):
    total: int
    items: List[ProjectResponse]
