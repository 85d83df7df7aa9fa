# -*- coding: utf-8 -*-
"""
대시보드 통계 서비스
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from app.repositories.customer_repository import CustomerRepository
from app.repositories.matching_repository import MatchingResultRepository
from app.repositories.program_repository import ProgramRepository
from app.schemas.analytics import (
    DashboardStats,
    RecentStats,
    SourceCount,
    TopCustomer,
    TopProgram,
    TotalsStats,
    TrendData,
    TrendPoint,
)

logger = logging.getLogger(__name__)

RECENT_DAYS = 7
TOP_LIMIT = 5


def bucket_start(day: date, period: str) -> date:
    """구간 시작일 (daily: 당일, weekly: 해당 주 월요일, monthly: 1일)"""
    if period == "daily":
        return day
    if period == "weekly":
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def trend_buckets(start: datetime, end: datetime, period: str) -> List[date]:
    """start~end 기간을 덮는 구간 시작일 목록 (오름차순, 빈 구간 포함)"""
    buckets: List[date] = []
    current = start.date()
    while current <= end.date():
        key = bucket_start(current, period)
        if not buckets or buckets[-1] != key:
            buckets.append(key)
        current += timedelta(days=1)
    return buckets


class AnalyticsService:
    """고객/프로그램/매칭 현황 집계"""

    def __init__(self, db: Session):
        self.customers = CustomerRepository(db)
        self.programs = ProgramRepository(db)
        self.results = MatchingResultRepository(db)

    def get_dashboard_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or datetime.utcnow()
        since = now - timedelta(days=RECENT_DAYS)

        totals = TotalsStats(
            customers=self.customers.count(),
            programs=self.programs.count(),
            active_programs=self.programs.count_open(now),
            matchings=self.results.count(),
        )
        recent = RecentStats(
            new_customers=self.customers.count_created_since(since),
            new_matchings=self.results.count_created_since(since),
            new_programs=self.programs.count_created_since(since),
        )

        top_programs = [
            TopProgram(
                id=program.id,
                title=program.title,
                data_source=program.data_source,
                match_count=match_count,
            )
            for program, match_count in self.results.top_programs(TOP_LIMIT)
        ]
        top_customers = [
            TopCustomer(
                id=customer.id,
                name=customer.name,
                industry=customer.industry,
                active_match_count=active_count,
            )
            for customer, active_count in self.results.top_customers(now, TOP_LIMIT)
        ]
        programs_by_source = [
            SourceCount(data_source=data_source, count=count)
            for data_source, count in self.programs.count_by_source()
        ]

        logger.debug(f"Dashboard stats computed: {totals}")

        return DashboardStats(
            totals=totals,
            recent=recent,
            top_programs=top_programs,
            top_customers=top_customers,
            programs_by_source=programs_by_source,
        )

    def get_trends(
        self,
        period: str = "weekly",
        days: int = 30,
        now: Optional[datetime] = None,
    ) -> TrendData:
        """
        최근 days일 동안의 신규 고객/매칭/프로그램 수를 기간별로 집계

        Args:
            period: daily | weekly | monthly
            days: 조회 기간 (일)
            now: 기준 시각 (기본: 현재 UTC)
        """
        now = now or datetime.utcnow()
        start = now - timedelta(days=days)

        points = {key: TrendPoint(date=key) for key in trend_buckets(start, now, period)}
        sources = (
            ("customers", self.customers),
            ("matchings", self.results),
            ("programs", self.programs),
        )
        for field, repo in sources:
            for day, count in repo.count_by_day(start):
                point = points.get(bucket_start(day, period))
                if point is not None:
                    setattr(point, field, getattr(point, field) + count)

        return TrendData(
            period=period,
            start_date=start,
            end_date=now,
            data=list(points.values()),
        )
