# -*- coding: utf-8 -*-
"""
Project Repository
고객 진행사업 데이터 접근 계층
"""
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from app.models.core import CustomerProject
from app.repositories.base_repository import BaseRepository


class ProjectRepository(BaseRepository[CustomerProject]):
    """진행사업 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, CustomerProject)

    def get_item(self, customer_id: UUID, program_id: UUID) -> Optional[CustomerProject]:
        """고객-프로그램 진행사업 조회"""
        return self.db.query(CustomerProject).filter(
            CustomerProject.customer_id == customer_id,
            CustomerProject.program_id == program_id,
        ).first()

    def get_for_customer(self, customer_id: UUID, project_id: UUID) -> Optional[CustomerProject]:
        """고객 소유의 진행사업만 조회"""
        return self.db.query(CustomerProject).filter(
            CustomerProject.id == project_id,
            CustomerProject.customer_id == customer_id,
        ).first()

    def get_by_customer(self, customer_id: UUID) -> List[CustomerProject]:
        """고객의 진행사업 목록 (최근 시작순, 프로그램 상세 포함)"""
        return (
            self.db.query(CustomerProject)
            .options(joinedload(CustomerProject.program))
            .filter(CustomerProject.customer_id == customer_id)
            .order_by(CustomerProject.started_at.desc())
            .all()
        )
