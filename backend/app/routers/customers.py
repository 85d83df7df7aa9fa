"""
Customer API Router
고객 관리 엔드포인트 (CRUD, 일괄 등록)
"""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.core import Customer
from app.repositories.customer_repository import CustomerRepository
from app.schemas.customer import (
    BulkImportResponse,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from app.services.customer_import_service import (
    CustomerImportService,
    ImportFileError,
    build_template,
)
from app.shared.pagination import create_paginated_response
from app.shared.schemas import PaginatedResponseSchema

router = APIRouter(tags=["customers"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# null로 비울 수 있는 필드
CLEARABLE_FIELDS = {
    "corporate_number", "industry", "company_size", "location", "budget",
    "contact_email", "contact_phone", "notes",
}


def _ensure_unique_business_number(repo: CustomerRepository, business_number: str):
    if repo.business_number_exists(business_number):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"이미 등록된 사업자등록번호입니다: {business_number}",
        )


@router.get("", response_model=PaginatedResponseSchema[CustomerResponse])
def list_customers(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    business_type: Optional[Literal["INDIVIDUAL", "CORPORATE"]] = None,
    industry: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = Query(None, description="상호명 또는 사업자등록번호 검색"),
    sort_by: Literal["created_at", "updated_at", "name", "business_number"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    """
    고객 목록 조회

    Args:
        page: 페이지 번호 (1부터)
        limit: 페이지 크기 (최대 100)
        business_type: 사업자 유형 필터
        industry: 업종 필터 (부분 일치)
        location: 지역 필터 (부분 일치)
        search: 상호명/사업자등록번호 검색어
        sort_by: 정렬 기준 컬럼
        sort_order: 정렬 방향
    """
    items, total = CustomerRepository(db).search(
        page=page,
        page_size=limit,
        business_type=business_type,
        industry=industry,
        location=location,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return create_paginated_response(items, total, page, limit)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(customer_data: CustomerCreate, db: Session = Depends(get_db)):
    """고객 등록 (사업자등록번호 중복 시 409)"""
    repo = CustomerRepository(db)
    _ensure_unique_business_number(repo, customer_data.business_number)

    customer = repo.create(Customer(**customer_data.model_dump()))
    db.commit()
    db.refresh(customer)

    return customer


@router.post("/bulk", response_model=BulkImportResponse)
async def bulk_import_customers(
    file: UploadFile = File(..., description="CSV 또는 Excel 파일"),
    db: Session = Depends(get_db),
):
    """CSV/Excel 파일에서 고객 일괄 등록

    지원 파일 형식:
    - CSV (.csv): UTF-8 또는 CP949 인코딩
    - Excel (.xlsx, .xls)

    첫 번째 행은 컬럼 헤더로 사용되며 keywords는 쉼표로 구분합니다.
    템플릿(GET /bulk/template)의 한글 헤더와 안내 행도 인식합니다.
    검증에 실패하거나 중복된 행은 errors에 행 번호와 함께 보고됩니다.
    """
    content = await file.read()

    try:
        return CustomerImportService(db).import_file(file.filename or "", content)
    except ImportFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/bulk/template")
def download_bulk_template():
    """일괄 등록용 Excel 템플릿 다운로드 (한글 헤더, 안내 행, 샘플 데이터)"""
    filename = f"customer_bulk_upload_template_{datetime.utcnow().strftime('%Y%m%d')}.xlsx"
    return Response(
        content=build_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: UUID, db: Session = Depends(get_db)):
    """고객 상세 조회"""
    return CustomerRepository(db).get_by_id_or_404(customer_id)


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: UUID,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
):
    """
    고객 정보 수정

    Args:
        customer_id: 고객 ID
        customer_data: 수정할 필드 (전달된 필드만 반영)
    """
    repo = CustomerRepository(db)
    customer = repo.get_by_id_or_404(customer_id)

    update_data = {
        field: value
        for field, value in customer_data.model_dump(exclude_unset=True).items()
        if value is not None or field in CLEARABLE_FIELDS
    }
    new_number = update_data.get("business_number")
    if new_number and new_number != customer.business_number:
        _ensure_unique_business_number(repo, new_number)

    for field, value in update_data.items():
        setattr(customer, field, value)

    repo.update(customer)
    db.commit()
    db.refresh(customer)

    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: UUID, db: Session = Depends(get_db)):
    """고객 삭제 (매칭 결과, 관심 프로그램 함께 삭제)"""
    repo = CustomerRepository(db)
    customer = repo.get_by_id_or_404(customer_id)

    repo.delete(customer)
    db.commit()
