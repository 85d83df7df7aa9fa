"""
규칙 기반 고객-프로그램 매칭 서비스

매칭 점수 계산:
- 업종 일치: +30점 (대상 업종에 "전체" 포함 시 모든 업종과 일치)
- 지역 일치: +30점 (대상 지역에 "전국" 포함 시 모든 지역과 일치)
- 키워드 일치: 키워드당 +10점 (최대 40점)
- 최소 점수 이상인 결과만 점수 내림차순으로 상위 N개 저장

동시성: 같은 고객에 대한 매칭이 동시에 실행되면 복합 키 upsert 기준 마지막 쓰기가
남고, force_refresh 삭제가 다른 실행의 upsert와 섞일 수 있음 (잠금 없음)
"""
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.core import Customer, MatchingResult, Program
from app.repositories.customer_repository import CustomerRepository
from app.repositories.matching_repository import MatchingResultRepository
from app.repositories.program_repository import ProgramRepository
from app.utils.errors import CustomerNotFoundError
from app.utils.metrics import (
    matching_results_persisted_total,
    matching_upsert_failures_total,
    record_matching_run,
)

logger = logging.getLogger(__name__)


# 점수 가중치
INDUSTRY_WEIGHT = 30
LOCATION_WEIGHT = 30
KEYWORD_WEIGHT = 10
KEYWORD_MAX = 40

# 모든 값과 일치하는 센티널 (소문자 비교)
INDUSTRY_WILDCARDS = frozenset({"전체", "all"})
LOCATION_WILDCARDS = frozenset({"전국", "nationwide"})


@dataclass
class ScoreBreakdown:
    """매칭 점수 구성"""
    industry_score: int = 0   # 0 or 30
    location_score: int = 0   # 0 or 30
    keyword_score: int = 0    # 0-40
    total_score: int = 0      # 0-100


@dataclass
class MatchCandidate:
    """저장 전 매칭 결과"""
    customer_id: UUID
    program_id: UUID
    score: int
    matched_industry: bool
    matched_location: bool
    matched_keywords: List[str] = field(default_factory=list)


def _has_wildcard(values: Sequence[str], wildcards: frozenset) -> bool:
    return any(value.strip().lower() in wildcards for value in values)


def _match_target(value: Optional[str], targets: Sequence[str], wildcards: frozenset) -> bool:
    if not value or not value.strip():
        return False
    if not targets:
        return False
    if _has_wildcard(targets, wildcards):
        return True

    needle = value.lower()
    return any(needle in target.lower() for target in targets)


def match_industry(customer_industry: Optional[str], program_target_audience: Sequence[str]) -> bool:
    """
    고객 업종과 프로그램 대상 업종 일치 여부

    대상 업종 항목이 고객 업종을 (대소문자 무시) 부분 문자열로 포함하면 일치.
    고객 업종이 비어 있거나 대상 목록이 비어 있으면 항상 불일치.
    """
    return _match_target(customer_industry, program_target_audience, INDUSTRY_WILDCARDS)


def match_location(customer_location: Optional[str], program_target_location: Sequence[str]) -> bool:
    """고객 지역과 프로그램 대상 지역 일치 여부 (업종과 동일 규칙, 센티널 "전국")"""
    return _match_target(customer_location, program_target_location, LOCATION_WILDCARDS)


def match_keywords(customer_keywords: Sequence[str], program_keywords: Sequence[str]) -> List[str]:
    """
    고객 키워드와 일치하는 프로그램 키워드 목록

    양방향 부분 문자열 비교 (대소문자 무시). "AI"가 "maintain"과도 일치하는 등
    짧은 키워드는 느슨하게 매칭됨. 결과는 프로그램 키워드 순서를 유지.
    """
    if not program_keywords or not customer_keywords:
        return []

    needles = [keyword.lower() for keyword in customer_keywords if keyword]
    matched = []
    for program_keyword in program_keywords:
        if not program_keyword:
            continue
        candidate = program_keyword.lower()
        if any(candidate in needle or needle in candidate for needle in needles):
            matched.append(program_keyword)
    return matched


def calculate_score(
    matched_industry: bool,
    matched_location: bool,
    matched_keyword_count: int,
) -> ScoreBreakdown:
    """매칭 점수 계산 (0-100점)"""
    industry_score = INDUSTRY_WEIGHT if matched_industry else 0
    location_score = LOCATION_WEIGHT if matched_location else 0
    keyword_score = min(matched_keyword_count * KEYWORD_WEIGHT, KEYWORD_MAX)

    return ScoreBreakdown(
        industry_score=industry_score,
        location_score=location_score,
        keyword_score=keyword_score,
        total_score=industry_score + location_score + keyword_score,
    )


def score_program(customer: Customer, program: Program) -> MatchCandidate:
    """고객 1명 × 프로그램 1개 매칭 점수와 근거"""
    matched_industry = match_industry(customer.industry, program.target_audience or [])
    matched_location = match_location(customer.location, program.target_location or [])
    matched = match_keywords(customer.keywords or [], program.keywords or [])

    breakdown = calculate_score(matched_industry, matched_location, len(matched))

    return MatchCandidate(
        customer_id=customer.id,
        program_id=program.id,
        score=breakdown.total_score,
        matched_industry=matched_industry,
        matched_location=matched_location,
        matched_keywords=matched,
    )


def rank_candidates(
    candidates: Sequence[MatchCandidate],
    min_score: int,
    max_results: int,
) -> List[MatchCandidate]:
    """최소 점수 필터 → 점수 내림차순 정렬 (동점은 입력 순서 유지) → 상위 max_results개"""
    qualified = [candidate for candidate in candidates if candidate.score >= min_score]
    qualified.sort(key=lambda candidate: candidate.score, reverse=True)
    return qualified[:max_results]


class MatchingService:
    """
    고객-프로그램 매칭 실행 서비스

    Repository는 생성자 주입 (기본값은 같은 세션으로 생성)

    Example:
        service = MatchingService(db)
        results = service.run_matching(customer_id, force_refresh=True)
    """

    def __init__(
        self,
        db: Session,
        customers: Optional[CustomerRepository] = None,
        programs: Optional[ProgramRepository] = None,
        results: Optional[MatchingResultRepository] = None,
    ):
        self.db = db
        self.customers = customers or CustomerRepository(db)
        self.programs = programs or ProgramRepository(db)
        self.results = results or MatchingResultRepository(db)
        self.failed: List[MatchCandidate] = []

    def run_matching(
        self,
        customer_id: UUID,
        min_score: Optional[int] = None,
        max_results: Optional[int] = None,
        force_refresh: bool = False,
    ) -> List[MatchingResult]:
        """
        고객에 대한 프로그램 매칭 실행

        Args:
            customer_id: 고객 ID
            min_score: 최소 점수 (기본: settings.matching_min_score)
            max_results: 최대 저장 결과 수 (기본: settings.matching_max_results)
            force_refresh: 기존 매칭 결과 삭제 후 재계산

        Returns:
            고객의 저장된 매칭 결과 (프로그램 상세 포함, 점수 내림차순)

        Raises:
            CustomerNotFoundError: 고객이 존재하지 않음 (아무것도 저장하지 않음)
        """
        if min_score is None:
            min_score = settings.matching_min_score
        if max_results is None:
            max_results = settings.matching_max_results

        started = time.perf_counter()
        logger.info(
            f"Running matching for customer: {customer_id}, min_score: {min_score}, "
            f"max_results: {max_results}, force_refresh: {force_refresh}"
        )

        customer = self.customers.get_by_id(customer_id)
        if customer is None:
            record_matching_run("customer_not_found")
            raise CustomerNotFoundError(str(customer_id))

        try:
            if force_refresh:
                deleted = self.results.delete_by_customer(customer_id)
                logger.debug(f"Deleted {deleted} previous matching results for {customer_id}")

            programs = self.programs.get_active_programs()
            candidates = [score_program(customer, program) for program in programs]
            top_results = rank_candidates(candidates, min_score, max_results)

            persisted = self._persist(top_results)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            record_matching_run("error", time.perf_counter() - started)
            raise

        record_matching_run("success", time.perf_counter() - started)
        logger.info(
            f"Matching completed for customer {customer_id}: scored {len(candidates)} programs, "
            f"saved {persisted}/{len(top_results)} results"
        )

        return self.results.get_by_customer(customer_id)

    def _persist(self, candidates: Sequence[MatchCandidate]) -> int:
        """
        매칭 결과 upsert (행 단위 best-effort)

        각 행은 개별 savepoint에서 저장하며, 실패한 행은 기록 후 건너뜀
        """
        self.failed = []
        persisted = 0

        for candidate in candidates:
            try:
                with self.db.begin_nested():
                    self.results.upsert(
                        customer_id=candidate.customer_id,
                        program_id=candidate.program_id,
                        score=candidate.score,
                        matched_industry=candidate.matched_industry,
                        matched_location=candidate.matched_location,
                        matched_keywords=candidate.matched_keywords,
                    )
                persisted += 1
            except SQLAlchemyError as e:
                self.failed.append(candidate)
                matching_upsert_failures_total.inc()
                logger.error(f"Failed to save matching result {candidate}: {e}")

        matching_results_persisted_total.inc(persisted)
        return persisted
