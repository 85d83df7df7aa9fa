# -*- coding: utf-8 -*-
"""
Base Repository
모든 Repository의 기본 클래스
"""
from datetime import date, datetime
from typing import Generic, TypeVar, Type, Optional, List, Tuple
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Query, Session
from app.utils.errors import raise_not_found

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """
    기본 Repository 클래스
    공통 CRUD 메서드 제공
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    def get_by_id(self, id: UUID) -> Optional[T]:
        """ID로 조회"""
        return self.db.get(self.model, id)

    def get_by_id_or_404(self, id: UUID) -> T:
        """ID로 조회 (없으면 ResourceNotFoundError)"""
        resource = self.get_by_id(id)
        if not resource:
            raise_not_found(self.model.__name__, str(id))
        return resource

    def exists(self, id: UUID) -> bool:
        """존재 여부 확인"""
        return self.get_by_id(id) is not None

    def count(self) -> int:
        """전체 개수"""
        return self.db.query(self.model).count()

    def count_by_day(self, since: datetime) -> List[Tuple[date, int]]:
        """created_at 기준 일별 생성 건수 (since 이후, 날짜순)"""
        day = func.date(self.model.created_at)
        rows = (
            self.db.query(day, func.count())
            .filter(self.model.created_at >= since)
            .group_by(day)
            .order_by(day)
            .all()
        )
        # SQLite는 'YYYY-MM-DD' 문자열, PostgreSQL은 date 반환
        return [
            (date.fromisoformat(value) if isinstance(value, str) else value, count)
            for value, count in rows
        ]

    def paginate(self, query: Query, page: int, page_size: int) -> Tuple[List[T], int]:
        """쿼리에 페이지네이션 적용 → (items, total)"""
        total = query.order_by(None).count()
        items = query.offset((page - 1) * page_size).limit(page_size).all()
        return items, total

    def create(self, obj: T) -> T:
        """생성"""
        self.db.add(obj)
        self.db.flush()
        return obj

    def update(self, obj: T) -> T:
        """업데이트"""
        self.db.add(obj)
        self.db.flush()
        return obj

    def delete(self, obj: T):
        """삭제"""
        self.db.delete(obj)
        self.db.flush()
