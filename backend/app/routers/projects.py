"""
Projects API Router
고객별 진행사업 및 사업진행현황
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.core import CustomerProject
from app.repositories.customer_repository import CustomerRepository
from app.repositories.program_repository import ProgramRepository
from app.repositories.project_repository import ProjectRepository
from app.schemas.progress import ProgressResponse
from app.schemas.project import (
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectUpdateRequest,
)
from app.services.progress_service import ProgressService
from app.utils.errors import CustomerNotFoundError, raise_not_found

logger = logging.getLogger(__name__)

router = APIRouter(tags=["projects"])


def _require_customer(db: Session, customer_id: UUID):
    if not CustomerRepository(db).exists(customer_id):
        raise CustomerNotFoundError(str(customer_id))


def _get_project_or_404(repo: ProjectRepository, customer_id: UUID, project_id: UUID) -> CustomerProject:
    project = repo.get_for_customer(customer_id, project_id)
    if not project:
        raise_not_found("CustomerProject", str(project_id))
    return project


@router.get("/{customer_id}/projects", response_model=ProjectListResponse)
def list_projects(customer_id: UUID, db: Session = Depends(get_db)):
    """진행사업 목록 (최근 시작순)"""
    _require_customer(db, customer_id)

    items = ProjectRepository(db).get_by_customer(customer_id)
    return ProjectListResponse(
        total=len(items),
        items=[ProjectResponse.model_validate(item) for item in items],
    )


@router.post(
    "/{customer_id}/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_project(
    customer_id: UUID,
    request: ProjectCreateRequest,
    db: Session = Depends(get_db),
):
    """진행사업 추가 (서류준비 상태로 시작, 이미 진행 중이면 409)"""
    _require_customer(db, customer_id)
    ProgramRepository(db).get_by_id_or_404(request.program_id)

    repo = ProjectRepository(db)
    if repo.get_item(customer_id, request.program_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="이미 진행 중인 사업입니다",
        )

    project = repo.create(CustomerProject(
        customer_id=customer_id,
        program_id=request.program_id,
        notes=request.notes,
    ))
    db.commit()
    db.refresh(project)

    logger.info(f"Project started: customer={customer_id}, program={request.program_id}")
    return project


@router.patch("/{customer_id}/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    customer_id: UUID,
    project_id: UUID,
    request: ProjectUpdateRequest,
    db: Session = Depends(get_db),
):
    """
    진행사업 수정

    Args:
        customer_id: 고객 ID
        project_id: 진행사업 ID
        request: status, notes, submitted_at, result_at 중 전달된 필드
    """
    _require_customer(db, customer_id)
    repo = ProjectRepository(db)
    project = _get_project_or_404(repo, customer_id, project_id)

    update_data = request.model_dump(exclude_unset=True)
    # status는 null로 비울 수 없음
    if update_data.get("status") is None:
        update_data.pop("status", None)

    for field, value in update_data.items():
        setattr(project, field, value)

    repo.update(project)
    db.commit()
    db.refresh(project)

    return project


@router.delete("/{customer_id}/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(customer_id: UUID, project_id: UUID, db: Session = Depends(get_db)):
    """진행사업 삭제 (관심 프로그램은 유지)"""
    _require_customer(db, customer_id)
    repo = ProjectRepository(db)
    project = _get_project_or_404(repo, customer_id, project_id)

    repo.delete(project)
    db.commit()


@router.get("/{customer_id}/progress", response_model=ProgressResponse)
def get_progress(customer_id: UUID, db: Session = Depends(get_db)):
    """
    사업진행현황

    - 마감되지 않은 매칭 프로그램, 7일 이내 마감 임박 프로그램
    - 마감되지 않은 관심 프로그램
    - 최근 활동 10건 (매칭, 관심 등록)
    - 진행사업 목록과 상태별 분류 (진행중/완료/종료)
    """
    return ProgressService(db).get_progress(customer_id)
