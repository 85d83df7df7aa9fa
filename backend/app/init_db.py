"""
데이터베이스 초기화 및 시드 데이터 생성
서버 시작 시 호출되어 테이블 생성 및 샘플 프로그램 설정

스키마는 SQLAlchemy create_all로 생성 (이미 존재하는 테이블은 무시)
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, List

from sqlalchemy.orm import Session

from app.config import settings
from app.database import init_db
from app.models import Program
from app.repositories.program_repository import ProgramRepository

logger = logging.getLogger(__name__)


def _sample_programs(now: datetime) -> List[Dict]:
    """로컬 개발용 샘플 정부지원사업"""
    return [
        {
            "data_source": "기업마당",
            "source_api_id": "PBLN_000000000090001",
            "title": "2025년 중소기업 스마트공장 구축 지원사업",
            "category": "기술",
            "target_audience": ["제조업"],
            "target_location": ["전국"],
            "keywords": ["스마트공장", "자동화", "디지털전환"],
            "budget_range": "최대 1억원",
            "deadline": now + timedelta(days=30),
        },
        {
            "data_source": "K-Startup",
            "source_api_id": "174512",
            "title": "초기창업패키지 (서울)",
            "category": "창업",
            "target_audience": ["전체"],
            "target_location": ["서울"],
            "keywords": ["창업", "사업화", "시제품"],
            "budget_range": "최대 1억원",
            "deadline": now + timedelta(days=14),
        },
        {
            "data_source": "KOCCA-PIMS",
            "source_api_id": "PIMS-2025-0031",
            "title": "콘텐츠 수출 마케팅 지원",
            "category": "수출",
            "target_audience": ["콘텐츠", "게임", "애니메이션"],
            "target_location": ["전국"],
            "keywords": ["수출", "해외마케팅", "콘텐츠"],
            "budget_range": "최대 5천만원",
            "deadline": now + timedelta(days=45),
        },
        {
            "data_source": "KOCCA-Finance",
            "source_api_id": "FIN-2025-0007",
            "title": "문화콘텐츠 기업 보증연계 투자",
            "category": "금융",
            "target_audience": ["콘텐츠"],
            "target_location": ["전국"],
            "keywords": ["투자", "보증", "자금"],
        },
        {
            "data_source": "기업마당",
            "source_api_id": "PBLN_000000000090417",
            "title": "부산 지역 IT 기업 인력 채용 지원",
            "category": "인력",
            "target_audience": ["정보통신업", "IT"],
            "target_location": ["부산"],
            "keywords": ["채용", "인건비", "IT"],
            "budget_range": "1인당 월 200만원",
            "deadline": now - timedelta(days=3),
        },
    ]


def init_database(db: Session) -> None:
    """
    데이터베이스 초기화

    1. 테이블 생성
    2. 샘플 프로그램 시딩 (SEED_SAMPLE_DATA=true)
    """
    logger.info("Initializing database...")

    try:
        init_db()
        logger.info("Database tables verified/created")

        if settings.seed_sample_data:
            seed_sample_programs(db)

        logger.info("Database initialization completed")

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


def seed_sample_programs(db: Session) -> int:
    """
    샘플 프로그램 생성 (이미 존재하는 프로그램은 건너뜀)

    Returns:
        새로 생성된 프로그램 수
    """
    repo = ProgramRepository(db)
    created = 0

    for values in _sample_programs(datetime.utcnow()):
        if repo.get_by_source(values["data_source"], values["source_api_id"]):
            continue
        repo.create(Program(**values))
        created += 1

    db.commit()
    logger.info(f"Seeded {created} sample programs")
    return created
