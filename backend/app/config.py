"""
환경 설정 모듈
Pydantic Settings를 사용하여 .env 파일에서 환경변수를 로드합니다.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Application
    app_name: str = "Ownership AI"
    app_version: str = "0.1.0"
    environment: str = "development"

    # Database
    database_url: str
    database_pool_size: int = 20
    database_max_overflow: int = 40

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    cors_allow_credentials: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Sentry (선택)
    sentry_dsn: Optional[str] = None
    sentry_traces_sample_rate: float = 0.1

    # Matching (규칙 기반 매칭 정책)
    matching_min_score: int = 30  # 업종 또는 지역 중 최소 하나 일치
    matching_max_results: int = 50

    # 서버 시작 시 샘플 프로그램 시딩 여부
    seed_sample_data: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins를 리스트로 변환"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def is_sqlite(self) -> bool:
        """SQLite 사용 여부 (테스트/로컬 개발)"""
        return self.database_url.startswith("sqlite")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# 전역 설정 인스턴스
settings = Settings()
