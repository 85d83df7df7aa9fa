# -*- coding: utf-8 -*-
"""
고객 사업진행현황 서비스

매칭 결과, 관심 프로그램, 진행사업을 마감 상태와 함께 한 번에 모아 보여줌
"""
import logging
import math
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.repositories.customer_repository import CustomerRepository
from app.repositories.matching_repository import MatchingResultRepository
from app.repositories.project_repository import ProjectRepository
from app.repositories.watchlist_repository import WatchlistRepository
from app.schemas.progress import (
    ActivityItem,
    MatchedProgram,
    ProgressCustomer,
    ProgressResponse,
    ProgressStats,
    ProjectProgress,
    ProjectsByStatus,
    WatchedProgram,
)
from app.utils.errors import CustomerNotFoundError

logger = logging.getLogger(__name__)

CLOSING_DAYS = 7
RECENT_ACTIVITY_LIMIT = 10

PROJECT_STATUS_LABELS = {
    "preparing": "서류준비",
    "submitted": "신청완료",
    "reviewing": "심사중",
    "selected": "선정",
    "rejected": "탈락",
    "cancelled": "취소/보류",
    "completed": "완료",
}

IN_PROGRESS_STATUSES = ("preparing", "submitted", "reviewing")
COMPLETED_STATUSES = ("selected", "completed")
ENDED_STATUSES = ("rejected", "cancelled")


def deadline_info(deadline: Optional[datetime], now: datetime) -> Dict:
    """
    마감 상태 계산

    - 마감일 없음: active / 상시모집
    - 지남: closed / 마감
    - 7일 이내: closing / D-n
    - 그 외: active / 진행중
    """
    if deadline is None:
        return {
            "deadline": None,
            "deadline_status": "active",
            "deadline_label": "상시모집",
            "days_left": None,
        }

    days_left = math.ceil((deadline - now).total_seconds() / 86400)
    if days_left < 0:
        status, label = "closed", "마감"
    elif days_left <= CLOSING_DAYS:
        status, label = "closing", f"D-{days_left}"
    else:
        status, label = "active", "진행중"

    return {
        "deadline": deadline,
        "deadline_status": status,
        "deadline_label": label,
        "days_left": days_left,
    }


class ProgressService:
    """고객별 사업진행현황 집계"""

    def __init__(self, db: Session):
        self.customers = CustomerRepository(db)
        self.results = MatchingResultRepository(db)
        self.watchlist = WatchlistRepository(db)
        self.projects = ProjectRepository(db)

    def get_progress(self, customer_id: UUID, now: Optional[datetime] = None) -> ProgressResponse:
        customer = self.customers.get_by_id(customer_id)
        if customer is None:
            raise CustomerNotFoundError(str(customer_id))

        now = now or datetime.utcnow()
        results = self.results.get_by_customer(customer_id)
        watch_items = self.watchlist.get_by_customer(customer_id)
        project_items = self.projects.get_by_customer(customer_id)

        matched = [
            MatchedProgram(
                program_id=result.program.id,
                matching_id=result.id,
                title=result.program.title,
                data_source=result.program.data_source,
                score=result.score,
                matched_industry=result.matched_industry,
                matched_location=result.matched_location,
                matched_keywords=result.matched_keywords or [],
                matched_at=result.created_at,
                **deadline_info(result.program.deadline, now),
            )
            for result in results
        ]
        active_programs = [p for p in matched if p.deadline_status != "closed"]
        closing_programs = sorted(
            (p for p in active_programs if p.deadline_status == "closing"),
            key=lambda p: p.days_left,
        )

        watchlist_programs = [
            program
            for program in (
                WatchedProgram(
                    program_id=item.program.id,
                    watchlist_id=item.id,
                    title=item.program.title,
                    data_source=item.program.data_source,
                    added_at=item.added_at,
                    **deadline_info(item.program.deadline, now),
                )
                for item in watch_items
            )
            if program.deadline_status != "closed"
        ]

        activities = [
            ActivityItem(
                type="matching",
                program_id=result.program.id,
                program_title=result.program.title,
                data_source=result.program.data_source,
                score=result.score,
                created_at=result.created_at,
            )
            for result in results
        ] + [
            ActivityItem(
                type="watchlist",
                program_id=item.program.id,
                program_title=item.program.title,
                data_source=item.program.data_source,
                created_at=item.added_at,
            )
            for item in watch_items
        ]
        activities.sort(key=lambda activity: activity.created_at, reverse=True)

        projects = [
            ProjectProgress(
                id=project.id,
                program_id=project.program.id,
                title=project.program.title,
                data_source=project.program.data_source,
                status=project.status,
                status_label=PROJECT_STATUS_LABELS.get(project.status, project.status),
                notes=project.notes,
                started_at=project.started_at,
                submitted_at=project.submitted_at,
                result_at=project.result_at,
                updated_at=project.updated_at,
                **deadline_info(project.program.deadline, now),
            )
            for project in project_items
        ]
        by_status = ProjectsByStatus(
            in_progress=[p for p in projects if p.status in IN_PROGRESS_STATUSES],
            completed=[p for p in projects if p.status in COMPLETED_STATUSES],
            ended=[p for p in projects if p.status in ENDED_STATUSES],
        )

        avg_score = (
            round(sum(result.score for result in results) / len(results), 1) if results else 0
        )
        stats = ProgressStats(
            total_matched=len(results),
            active_count=len(active_programs),
            closing_count=len(closing_programs),
            watchlist_count=len(watchlist_programs),
            avg_score=avg_score,
            projects_total=len(projects),
            projects_in_progress=len(by_status.in_progress),
            projects_completed=len(by_status.completed),
            projects_ended=len(by_status.ended),
        )

        logger.debug(f"Progress computed for customer {customer_id}: {stats}")

        return ProgressResponse(
            customer=ProgressCustomer(id=customer.id, name=customer.name),
            stats=stats,
            active_programs=active_programs,
            closing_programs=closing_programs,
            watchlist_programs=watchlist_programs,
            recent_activities=activities[:RECENT_ACTIVITY_LIMIT],
            projects=projects,
            projects_by_status=by_status,
        )
