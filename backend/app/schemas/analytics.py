# -*- coding: utf-8 -*-
"""
대시보드 통계 스키마
"""
from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TotalsStats(BaseModel):
    """전체 현황"""
    customers: int = 0
    programs: int = 0
    active_programs: int = Field(0, description="마감일이 없거나 지나지 않은 프로그램")
    matchings: int = 0


class RecentStats(BaseModel):
    """최근 7일 현황"""
    new_customers: int = 0
    new_matchings: int = 0
    new_programs: int = 0


class TopProgram(BaseModel):
    id: UUID
    title: str
    data_source: str
    match_count: int


class TopCustomer(BaseModel):
    id: UUID
    name: str
    industry: Optional[str] = None
    active_match_count: int = Field(..., description="진행중인 프로그램 매칭 수")


class SourceCount(BaseModel):
    data_source: str
    count: int


class DashboardStats(BaseModel):
    """대시보드 통계 응답"""
    totals: TotalsStats
    recent: RecentStats
    top_programs: List[TopProgram] = Field(default_factory=list)
    top_customers: List[TopCustomer] = Field(default_factory=list)
    programs_by_source: List[SourceCount] = Field(default_factory=list)


TrendPeriod = Literal["daily", "weekly", "monthly"]


class TrendPoint(BaseModel):
    """기간 구간 (date: 일/주 시작 월요일/월 1일)"""
    date: date
    customers: int = 0
    matchings: int = 0
    programs: int = 0


class TrendData(BaseModel):
    """시계열 트렌드 응답"""
    period: TrendPeriod
    start_date: datetime
    end_date: datetime
    data: List[TrendPoint] = Field(default_factory=list)
