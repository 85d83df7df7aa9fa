# -*- coding: utf-8 -*-
"""
Watchlist Repository
고객 관심 프로그램 데이터 접근 계층
"""
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from app.models.core import CustomerProgram
from app.repositories.base_repository import BaseRepository


class WatchlistRepository(BaseRepository[CustomerProgram]):
    """관심 프로그램 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, CustomerProgram)

    def get_item(self, customer_id: UUID, program_id: UUID) -> Optional[CustomerProgram]:
        """고객-프로그램 관심 항목 조회"""
        return self.db.query(CustomerProgram).filter(
            CustomerProgram.customer_id == customer_id,
            CustomerProgram.program_id == program_id,
        ).first()

    def get_by_customer(self, customer_id: UUID) -> List[CustomerProgram]:
        """고객의 관심 프로그램 목록 (최근 추가순, 프로그램 상세 포함)"""
        return (
            self.db.query(CustomerProgram)
            .options(joinedload(CustomerProgram.program))
            .filter(CustomerProgram.customer_id == customer_id)
            .order_by(CustomerProgram.added_at.desc())
            .all()
        )
