"""
Analytics API Router
대시보드 통계, 시계열 트렌드
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.analytics import DashboardStats, TrendData, TrendPeriod
from app.services.analytics_service import AnalyticsService

router = APIRouter(tags=["analytics"])


@router.get("", response_model=DashboardStats)
def get_dashboard_stats(db: Session = Depends(get_db)):
    """
    대시보드 통계

    - 전체 고객/프로그램/진행중 프로그램/매칭 수
    - 최근 7일 신규 고객/매칭/프로그램 수
    - 매칭이 많은 프로그램 Top 5, 진행중 공고 매칭이 많은 고객 Top 5
    - 데이터 출처별 프로그램 수
    """
    return AnalyticsService(db).get_dashboard_stats()


@router.get("/trends", response_model=TrendData)
def get_trends(
    period: TrendPeriod = Query("weekly", description="집계 단위"),
    days: int = Query(30, ge=7, le=365, description="조회 기간 (일)"),
    db: Session = Depends(get_db),
):
    """
    시계열 트렌드 (신규 고객/매칭/프로그램 수)

    weekly는 월요일, monthly는 1일 기준으로 묶으며 건수가 없는 구간도 0으로 포함합니다.
    """
    return AnalyticsService(db).get_trends(period=period, days=days)
