"""
Watchlist API Router
고객별 관심 프로그램
"""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.core import CustomerProgram
from app.repositories.customer_repository import CustomerRepository
from app.repositories.program_repository import ProgramRepository
from app.repositories.watchlist_repository import WatchlistRepository
from app.schemas.watchlist import WatchlistAddRequest, WatchlistItemResponse, WatchlistResponse
from app.utils.errors import CustomerNotFoundError, raise_not_found

router = APIRouter(tags=["watchlist"])


def _require_customer(db: Session, customer_id: UUID):
    if not CustomerRepository(db).exists(customer_id):
        raise CustomerNotFoundError(str(customer_id))


@router.get("/{customer_id}/watchlist", response_model=WatchlistResponse)
def list_watchlist(customer_id: UUID, db: Session = Depends(get_db)):
    """관심 프로그램 목록 (최근 추가순)"""
    _require_customer(db, customer_id)

    items = WatchlistRepository(db).get_by_customer(customer_id)
    return WatchlistResponse(
        total=len(items),
        items=[WatchlistItemResponse.model_validate(item) for item in items],
    )


@router.post(
    "/{customer_id}/watchlist",
    response_model=WatchlistItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_to_watchlist(
    customer_id: UUID,
    request: WatchlistAddRequest,
    db: Session = Depends(get_db),
):
    """관심 프로그램 추가 (이미 등록된 경우 409)"""
    _require_customer(db, customer_id)
    ProgramRepository(db).get_by_id_or_404(request.program_id)

    repo = WatchlistRepository(db)
    if repo.get_item(customer_id, request.program_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 관심 프로그램으로 등록되어 있습니다",
        )

    item = repo.create(CustomerProgram(
        customer_id=customer_id,
        program_id=request.program_id,
        notes=request.notes,
    ))
    db.commit()
    db.refresh(item)

    return item


@router.delete("/{customer_id}/watchlist/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_watchlist(customer_id: UUID, program_id: UUID, db: Session = Depends(get_db)):
    """관심 프로그램 삭제"""
    repo = WatchlistRepository(db)
    item = repo.get_item(customer_id, program_id)
    if not item:
        raise_not_found("CustomerProgram", f"{customer_id}/{program_id}")

    repo.delete(item)
    db.commit()
