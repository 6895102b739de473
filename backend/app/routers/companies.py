"""Companies 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.user import User
from app.schemas.company import (
    CompanyCreate,
    CompanyDetailOut,
    CompanyOut,
    CompanyShareCreate,
    CompanyShareOut,
    ShareStudentsOut,
)
from app.services import company_service

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("", response_model=List[CompanyOut])
def list_companies(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return company_service.list_companies(db)


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(
    data: CompanyCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return company_service.create_company(db, data)


@router.get("/{company_id}", response_model=CompanyDetailOut)
def get_company(
    company_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return company_service.get_company(db, company_id)


@router.post("/{company_id}/share-students", response_model=ShareStudentsOut)
def share_students(
    company_id: int,
    data: CompanyShareCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    share, shared_count = company_service.share_students(db, company_id, data)
    return ShareStudentsOut(
        message="학생 명단이 기업에 공유되었습니다.",
        shared_students=shared_count,
        share=CompanyShareOut.model_validate(share),
    )
