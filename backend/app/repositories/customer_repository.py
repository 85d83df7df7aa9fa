# -*- coding: utf-8 -*-
"""
Customer Repository
고객 데이터 접근 계층
"""
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.models.core import Customer
from app.repositories.base_repository import BaseRepository

# 정렬 가능한 컬럼
SORTABLE_FIELDS = ("created_at", "updated_at", "name", "business_number")


class CustomerRepository(BaseRepository[Customer]):
    """고객 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, Customer)

    def get_by_business_number(self, business_number: str) -> Optional[Customer]:
        """사업자등록번호로 조회"""
        return self.db.query(Customer).filter(
            Customer.business_number == business_number
        ).first()

    def business_number_exists(self, business_number: str) -> bool:
        """사업자등록번호 중복 확인"""
        return self.get_by_business_number(business_number) is not None

    def existing_business_numbers(self, business_numbers: Iterable[str]) -> Set[str]:
        """이미 등록된 사업자등록번호 집합 (일괄 등록 중복 검사용)"""
        numbers = list(business_numbers)
        if not numbers:
            return set()
        rows = self.db.query(Customer.business_number).filter(
            Customer.business_number.in_(numbers)
        ).all()
        return {row[0] for row in rows}

    def search(
        self,
        page: int = 1,
        page_size: int = 10,
        business_type: Optional[str] = None,
        industry: Optional[str] = None,
        location: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Tuple[List[Customer], int]:
        """필터/정렬/페이지네이션 적용 고객 목록"""
        query = self.db.query(Customer)

        if business_type:
            query = query.filter(Customer.business_type == business_type)
        if industry:
            query = query.filter(Customer.industry.icontains(industry, autoescape=True))
        if location:
            query = query.filter(Customer.location.icontains(location, autoescape=True))
        if search:
            query = query.filter(or_(
                Customer.name.icontains(search, autoescape=True),
                Customer.business_number.icontains(search, autoescape=True),
            ))

        if sort_by not in SORTABLE_FIELDS:
            sort_by = "created_at"
        order_field = getattr(Customer, sort_by)
        query = query.order_by(order_field.asc() if sort_order == "asc" else order_field.desc())

        return self.paginate(query, page, page_size)

    def count_created_since(self, since: datetime) -> int:
        """기간 내 신규 고객 수"""
        return self.db.query(Customer).filter(Customer.created_at >= since).count()
