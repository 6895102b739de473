"""Batches 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.batch import BatchCompletionOut, BatchCreate, BatchOut, BatchUpdate
from app.schemas.user import UserOut
from app.services import batch_service
from app.middleware.auth_middleware import get_current_user, require_admin
from app.models.user import User

router = APIRouter(prefix="/api/batches", tags=["batches"])


@router.get("", response_model=List[BatchOut])
def list_batches(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return batch_service.list_batches(db)


@router.post("", response_model=BatchOut, status_code=status.HTTP_201_CREATED)
def create_batch(
    data: BatchCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return batch_service.create_batch(db, data)


@router.get("/{batch_id}", response_model=BatchOut)
def get_batch(batch_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return batch_service.get_batch(db, batch_id)


@router.put("/{batch_id}", response_model=BatchOut)
def update_batch(
    batch_id: int,
    data: BatchUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return batch_service.update_batch(db, batch_id, data)


@router.get("/{batch_id}/students", response_model=List[UserOut])
def list_batch_students(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return batch_service.list_batch_students(db, batch_id)


@router.put("/{batch_id}/complete", response_model=BatchCompletionOut)
def complete_batch(
    batch_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    batch, converted = batch_service.complete_batch(db, batch_id)
    return BatchCompletionOut(
        message="차수가 완료 처리되어 소속 학생이 동문으로 전환되었습니다.",
        batch=BatchOut.model_validate(batch),
        converted_count=converted,
    )
