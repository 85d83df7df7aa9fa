# -*- coding: utf-8 -*-
"""
MatchingResult Repository
매칭 결과 데이터 접근 계층
"""
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload
from app.models.core import Customer, MatchingResult, Program
from app.repositories.base_repository import BaseRepository


class MatchingResultRepository(BaseRepository[MatchingResult]):
    """매칭 결과 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, MatchingResult)

    def get_pair(self, customer_id: UUID, program_id: UUID) -> Optional[MatchingResult]:
        """(customer_id, program_id) 복합 키로 조회"""
        return self.db.query(MatchingResult).filter(
            MatchingResult.customer_id == customer_id,
            MatchingResult.program_id == program_id,
        ).first()

    def upsert(
        self,
        customer_id: UUID,
        program_id: UUID,
        score: int,
        matched_industry: bool,
        matched_location: bool,
        matched_keywords: Sequence[str],
    ) -> MatchingResult:
        """복합 키 기준 insert-or-update"""
        result = self.get_pair(customer_id, program_id)
        if result is None:
            result = MatchingResult(customer_id=customer_id, program_id=program_id)
            self.db.add(result)

        result.score = score
        result.matched_industry = matched_industry
        result.matched_location = matched_location
        result.matched_keywords = list(matched_keywords)
        result.updated_at = datetime.utcnow()

        self.db.flush()
        return result

    def delete_by_customer(self, customer_id: UUID) -> int:
        """고객의 매칭 결과 전체 삭제 (삭제된 행 수 반환)"""
        return self.db.query(MatchingResult).filter(
            MatchingResult.customer_id == customer_id
        ).delete(synchronize_session="fetch")

    def get_by_customer(
        self,
        customer_id: UUID,
        min_score: float = 0,
        limit: Optional[int] = None,
    ) -> List[MatchingResult]:
        """고객의 매칭 결과 (프로그램 상세 포함, 점수 내림차순)"""
        query = (
            self.db.query(MatchingResult)
            .options(joinedload(MatchingResult.program))
            .filter(
                MatchingResult.customer_id == customer_id,
                MatchingResult.score >= min_score,
            )
            .order_by(MatchingResult.score.desc(), MatchingResult.created_at.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_created_since(self, since: datetime) -> int:
        """기간 내 신규 매칭 수"""
        return self.db.query(MatchingResult).filter(
            MatchingResult.created_at >= since
        ).count()

    def top_programs(self, limit: int = 5) -> List[Tuple[Program, int]]:
        """가장 많이 매칭된 프로그램"""
        match_count = func.count(MatchingResult.id).label("match_count")
        return (
            self.db.query(Program, match_count)
            .join(MatchingResult, MatchingResult.program_id == Program.id)
            .group_by(Program.id)
            .order_by(match_count.desc())
            .limit(limit)
            .all()
        )

    def top_customers(self, now: datetime, limit: int = 5) -> List[Tuple[Customer, int]]:
        """진행중인 공고(마감일 없음 또는 미래) 매칭이 많은 고객"""
        active_count = func.count(MatchingResult.id).label("active_count")
        return (
            self.db.query(Customer, active_count)
            .join(MatchingResult, MatchingResult.customer_id == Customer.id)
            .join(Program, MatchingResult.program_id == Program.id)
            .filter(or_(Program.deadline.is_(None), Program.deadline >= now))
            .group_by(Customer.id)
            .order_by(active_count.desc())
            .limit(limit)
            .all()
        )
