"""
Program API Router
정부지원사업 프로그램 조회/관리 엔드포인트
"""
from collections import Counter
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.core import Program
from app.repositories.program_repository import ProgramRepository
from app.schemas.program import ProgramCreate, ProgramListResponse, ProgramResponse, ProgramUpdate
from app.shared.pagination import total_pages

router = APIRouter(tags=["programs"])

# 한국콘텐츠진흥원은 두 개의 API(PIMS, 지원사업)로 수집됨
KOCCA_ALIAS = "한국콘텐츠진흥원"
KOCCA_SOURCES = ("KOCCA-PIMS", "KOCCA-Finance")


def resolve_data_sources(data_source: Optional[str]) -> List[str]:
    """데이터 출처 필터 값 → 실제 data_source 목록"""
    if not data_source:
        return []
    if data_source == KOCCA_ALIAS:
        return list(KOCCA_SOURCES)
    return [data_source]


def source_distribution(programs: Sequence[Program]) -> Dict[str, int]:
    """데이터 출처별 건수 (KOCCA 출처는 하나로 합산)"""
    counter = Counter(
        KOCCA_ALIAS if program.data_source in KOCCA_SOURCES else program.data_source
        for program in programs
    )
    return dict(counter)


@router.get("", response_model=ProgramListResponse)
def list_programs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    data_source: Optional[str] = Query(None, description="데이터 출처 (한국콘텐츠진흥원은 KOCCA 전체)"),
    category: Optional[str] = None,
    target_audience: Optional[str] = Query(None, description="대상 업종 포함 여부"),
    target_location: Optional[str] = Query(None, description="대상 지역 포함 여부"),
    keyword: Optional[str] = Query(None, description="제목 또는 키워드 검색"),
    sync_status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """
    프로그램 목록 조회 (등록일 최신순)

    Args:
        page: 페이지 번호
        page_size: 페이지 크기 (최대 100)
        data_source: 데이터 출처 필터
        category: 분류 필터
        target_audience: 대상 업종 필터
        target_location: 대상 지역 필터
        keyword: 제목/키워드 검색어
        sync_status: 동기화 상태 필터 (active, archived, deleted)
    """
    items, total = ProgramRepository(db).search(
        page=page,
        page_size=page_size,
        data_sources=resolve_data_sources(data_source),
        category=category,
        target_audience=target_audience,
        target_location=target_location,
        keyword=keyword,
        sync_status=sync_status,
    )

    return ProgramListResponse(
        items=[ProgramResponse.model_validate(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
        source_distribution=source_distribution(items),
    )


@router.post("", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
def create_program(program_data: ProgramCreate, db: Session = Depends(get_db)):
    """프로그램 등록 (data_source + source_api_id 중복 시 409)"""
    repo = ProgramRepository(db)
    if repo.get_by_source(program_data.data_source, program_data.source_api_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"이미 등록된 프로그램입니다: "
                f"{program_data.data_source}/{program_data.source_api_id}"
            ),
        )

    values = program_data.model_dump(exclude_none=True)
    program = repo.create(Program(**values))
    db.commit()
    db.refresh(program)

    return program


@router.get("/{program_id}", response_model=ProgramResponse)
def get_program(program_id: UUID, db: Session = Depends(get_db)):
    """프로그램 상세 조회"""
    return ProgramRepository(db).get_by_id_or_404(program_id)


@router.patch("/{program_id}", response_model=ProgramResponse)
def update_program(
    program_id: UUID,
    program_data: ProgramUpdate,
    db: Session = Depends(get_db),
):
    """프로그램 수정 (sync_status를 archived로 바꾸면 매칭 대상에서 제외)"""
    repo = ProgramRepository(db)
    program = repo.get_by_id_or_404(program_id)

    for field, value in program_data.model_dump(exclude_unset=True).items():
        if value is None and field in ("title", "sync_status"):
            continue
        if value is None and field in ("target_audience", "target_location", "keywords"):
            value = []
        setattr(program, field, value)

    repo.update(program)
    db.commit()
    db.refresh(program)

    return program


@router.delete("/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_program(program_id: UUID, db: Session = Depends(get_db)):
    """프로그램 삭제 (매칭 결과, 관심 등록 함께 삭제)"""
    repo = ProgramRepository(db)
    program = repo.get_by_id_or_404(program_id)

    repo.delete(program)
    db.commit()
