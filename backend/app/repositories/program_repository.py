# -*- coding: utf-8 -*-
"""
Program Repository
정부지원사업 프로그램 데이터 접근 계층
"""
import json
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from sqlalchemy import String, func, or_
from sqlalchemy.orm import Session
from app.models.core import Program
from app.repositories.base_repository import BaseRepository

ACTIVE_STATUS = "active"


def escape_like(value: str) -> str:
    """LIKE 패턴 특수문자(\\, %, _) 이스케이프"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _json_list_contains(column, value: str):
    """JSON 문자열 배열에 value가 원소로 포함되는지 (DB 독립적, 대소문자 무시)

    원소는 직렬화된 형태("값")로 비교하므로 부분 문자열은 일치하지 않음
    """
    element = escape_like(json.dumps(value, ensure_ascii=False))
    return column.cast(String).ilike(f"%{element}%", escape="\\")


class ProgramRepository(BaseRepository[Program]):
    """프로그램 Repository"""

    def __init__(self, db: Session):
        super().__init__(db, Program)

    def get_by_source(self, data_source: str, source_api_id: str) -> Optional[Program]:
        """데이터 소스 + 원천 ID로 조회"""
        return self.db.query(Program).filter(
            Program.data_source == data_source,
            Program.source_api_id == source_api_id,
        ).first()

    def get_active_programs(self) -> List[Program]:
        """매칭 대상 (sync_status == 'active') 프로그램 목록"""
        return self.db.query(Program).filter(
            Program.sync_status == ACTIVE_STATUS
        ).all()

    def search(
        self,
        page: int = 1,
        page_size: int = 20,
        data_sources: Optional[Sequence[str]] = None,
        category: Optional[str] = None,
        target_audience: Optional[str] = None,
        target_location: Optional[str] = None,
        keyword: Optional[str] = None,
        sync_status: Optional[str] = None,
    ) -> Tuple[List[Program], int]:
        """필터 적용 프로그램 목록 (등록일 최신순)"""
        query = self.db.query(Program)

        if data_sources:
            query = query.filter(Program.data_source.in_(list(data_sources)))
        if category:
            query = query.filter(Program.category == category)
        if target_audience:
            query = query.filter(_json_list_contains(Program.target_audience, target_audience))
        if target_location:
            query = query.filter(_json_list_contains(Program.target_location, target_location))
        if keyword:
            query = query.filter(or_(
                Program.title.icontains(keyword, autoescape=True),
                _json_list_contains(Program.keywords, keyword),
            ))
        if sync_status:
            query = query.filter(Program.sync_status == sync_status)

        query = query.order_by(Program.registered_at.desc())
        return self.paginate(query, page, page_size)

    def count_open(self, now: datetime) -> int:
        """진행중인 프로그램 수 (마감일이 없거나 미래)"""
        return self.db.query(Program).filter(
            or_(Program.deadline.is_(None), Program.deadline >= now)
        ).count()

    def count_created_since(self, since: datetime) -> int:
        """기간 내 신규 프로그램 수"""
        return self.db.query(Program).filter(Program.created_at >= since).count()

    def count_by_source(self) -> List[Tuple[str, int]]:
        """데이터 소스별 프로그램 수 (많은 순)"""
        count_col = func.count(Program.id)
        return [
            (data_source, count)
            for data_source, count in self.db.query(Program.data_source, count_col)
            .group_by(Program.data_source)
            .order_by(count_col.desc())
            .all()
        ]
