"""
Database 연결 및 세션 관리
SQLAlchemy를 사용한 DB 세션 팩토리
"""
import json
import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.config import settings

logger = logging.getLogger(__name__)

# SQLAlchemy Base 클래스
Base = declarative_base()


def json_serializer(value: Any) -> str:
    """
    JSON 컬럼 직렬화

    한글 키워드/지역을 이스케이프하지 않고 저장해야 LIKE 기반 목록 필터가 동작함
    """
    return json.dumps(value, ensure_ascii=False)


def _engine_options() -> dict:
    """DB 종류별 엔진 옵션"""
    if settings.is_sqlite:
        # SQLite는 커넥션 풀 크기 옵션을 지원하지 않음
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,  # 연결 유효성 체크
    }


# Database Engine 생성 (프로세스 전역 커넥션 풀)
engine = create_engine(
    settings.database_url,
    echo=False,
    json_serializer=json_serializer,
    **_engine_options(),
)

# SessionLocal 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI Dependency로 사용할 DB 세션 제공

    Usage:
        @router.get("/customers")
        def list_customers(db: Session = Depends(get_db)):
            return CustomerRepository(db).search()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context Manager로 사용할 DB 세션 제공

    Usage:
        with get_db_context() as db:
            programs = ProgramRepository(db).get_active_programs()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    데이터베이스 초기화
    테이블이 없으면 생성
    """
    # 모든 모델을 import해야 Base.metadata에 등록됨
    from app.models import core  # noqa: F401

    # 테이블 생성 (이미 존재하면 무시)
    Base.metadata.create_all(bind=engine)


def check_db_connection() -> bool:
    """
    데이터베이스 연결 상태 확인

    Returns:
        연결 성공 시 True, 실패 시 False
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
