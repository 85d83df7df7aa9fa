# -*- coding: utf-8 -*-
"""
고객 사업진행현황 스키마
"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

DeadlineStatus = Literal["active", "closing", "closed"]


class DeadlineInfo(BaseModel):
    """마감 상태 (상시모집/진행중/D-n/마감)"""
    deadline: Optional[datetime] = None
    deadline_status: DeadlineStatus
    deadline_label: str
    days_left: Optional[int] = Field(None, description="마감까지 남은 일수 (마감일 없으면 null)")


class ProgressCustomer(BaseModel):
    id: UUID
    name: str


class ProgressStats(BaseModel):
    total_matched: int = 0
    active_count: int = 0
    closing_count: int = 0
    watchlist_count: int = 0
    avg_score: float = Field(0, description="매칭 점수 평균 (소수 첫째 자리)")
    projects_total: int = 0
    projects_in_progress: int = 0
    projects_completed: int = 0
    projects_ended: int = 0


class MatchedProgram(DeadlineInfo):
    """마감되지 않은 매칭 프로그램"""
    program_id: UUID
    matching_id: UUID
    title: str
    data_source: str
    score: int
    matched_industry: bool
    matched_location: bool
    matched_keywords: List[str] = Field(default_factory=list)
    matched_at: datetime


class WatchedProgram(DeadlineInfo):
    """마감되지 않은 관심 프로그램"""
    program_id: UUID
    watchlist_id: UUID
    title: str
    data_source: str
    added_at: datetime


class ActivityItem(BaseModel):
    type: Literal["matching", "watchlist"]
    program_id: UUID
    program_title: str
    data_source: str
    score: Optional[int] = None
    created_at: datetime


class ProjectProgress(DeadlineInfo):
    id: UUID
    program_id: UUID
    title: str
    data_source: str
    status: str
    status_label: str
    notes: Optional[str] = None
    started_at: datetime
    submitted_at: Optional[datetime] = None
    result_at: Optional[datetime] = None
    updated_at: datetime


class ProjectsByStatus(BaseModel):
    in_progress: List[ProjectProgress] = Field(default_factory=list)
    completed: List[ProjectProgress] = Field(default_factory=list)
    ended: List[ProjectProgress] = Field(default_factory=list)


class ProgressResponse(BaseModel):
    """고객별 사업진행현황"""
    customer: ProgressCustomer
    stats: ProgressStats
    active_programs: List[MatchedProgram] = Field(default_factory=list)
    closing_programs: List[MatchedProgram] = Field(default_factory=list)
    watchlist_programs: List[WatchedProgram] = Field(default_factory=list)
    recent_activities: List[ActivityItem] = Field(default_factory=list)
    projects: List[ProjectProgress] = Field(default_factory=list)
    projects_by_status: ProjectsByStatus
