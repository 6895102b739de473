"""Students 기능 API 라우터입니다. 학생 본인용 프로필/동문 조회와 관리자용 학생 명부 관리를 제공합니다."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.middleware.auth_middleware import require_admin, require_student
from app.models.user import User
from app.schemas.user import (
    StudentCreate,
    StudentProfileUpdate,
    StudentStatsOut,
    StudentUpdate,
    UserOut,
    UserPublicOut,
)
from app.services import alumni_service, student_service

router = APIRouter(prefix="/api/students", tags=["students"])


# 학생 본인용 경로는 /{user_id} 보다 먼저 등록해야 한다.
@router.get("/profile", response_model=UserOut)
def get_my_profile(current_user: User = Depends(require_student)):
    return current_user


@router.put("/profile", response_model=UserOut)
def update_my_profile(
    data: StudentProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return alumni_service.update_profile(db, current_user, data)


@router.get("/alumni", response_model=List[UserPublicOut])
def list_alumni(
    batch_id: Optional[int] = None,
    company: Optional[str] = None,
    course: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc",
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_student),
):
    return alumni_service.list_alumni(
        db,
        batch_id=batch_id,
        company=company,
        course=course,
        department=department,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/alumni/companies", response_model=List[str])
def list_alumni_companies(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_student),
):
    return alumni_service.list_alumni_companies(db)


@router.get("/alumni/{user_id}", response_model=UserPublicOut)
def get_alumni(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_student),
):
    return alumni_service.get_alumni(db, user_id)


@router.get("/my-batch", response_model=List[UserPublicOut])
def list_my_batch_mates(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return alumni_service.list_batch_mates(db, current_user)


@router.get("/stats", response_model=StudentStatsOut)
def get_my_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return alumni_service.get_student_stats(db, current_user)


@router.get("", response_model=List[UserOut])
def list_students(
    batch_id: Optional[int] = None,
    is_alumni: Optional[bool] = None,
    course: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc",
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return student_service.list_students(
        db,
        batch_id=batch_id,
        is_alumni=is_alumni,
        course=course,
        department=department,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_student(
    data: StudentCreate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return student_service.create_student(db, data)


@router.get("/{user_id}", response_model=UserOut)
def get_student(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return student_service.get_student(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_student(
    user_id: int,
    data: StudentUpdate,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    return student_service.update_student(db, user_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(
    user_id: int,
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    student_service.delete_student(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
