"""
Matching API Router
고객-프로그램 매칭 실행 및 결과 조회
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.repositories.customer_repository import CustomerRepository
from app.repositories.matching_repository import MatchingResultRepository
from app.schemas.matching import MatchingResponse, MatchingResultResponse, MatchingRunRequest
from app.services.matching_service import MatchingService
from app.utils.errors import CustomerNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["matching"])


def get_matching_service(db: Session = Depends(get_db)) -> MatchingService:
    """요청 단위 MatchingService (같은 세션의 Repository 주입)"""
    return MatchingService(
        db,
        customers=CustomerRepository(db),
        results=MatchingResultRepository(db),
    )


def _to_response(results) -> MatchingResponse:
    return MatchingResponse(
        total=len(results),
        results=[MatchingResultResponse.model_validate(result) for result in results],
    )


@router.post("", response_model=MatchingResponse)
def run_matching(
    request: MatchingRunRequest,
    service: MatchingService = Depends(get_matching_service),
):
    """
    고객 매칭 실행

    활성 프로그램 전체를 점수화하여 최소 점수 이상 상위 결과를 저장하고,
    고객의 저장된 매칭 결과 전체를 점수순으로 반환합니다.

    - 업종 일치 30점, 지역 일치 30점, 키워드당 10점 (최대 40점)
    - force_refresh=true: 기존 결과 삭제 후 재계산
    """
    logger.info(
        f"Matching requested: customer={request.customer_id}, force_refresh={request.force_refresh}"
    )
    results = service.run_matching(
        request.customer_id,
        min_score=request.min_score,
        max_results=request.max_results,
        force_refresh=request.force_refresh,
    )
    return _to_response(results)


@router.get("/{customer_id}", response_model=MatchingResponse)
def get_matching_results(
    customer_id: UUID,
    limit: int = Query(10, ge=1, le=100),
    min_score: int = Query(0, ge=0, le=100),
    db: Session = Depends(get_db),
):
    """저장된 매칭 결과 조회 (점수 내림차순)"""
    if not CustomerRepository(db).exists(customer_id):
        raise CustomerNotFoundError(str(customer_id))

    results = MatchingResultRepository(db).get_by_customer(
        customer_id, min_score=min_score, limit=limit
    )
    return _to_response(results)
