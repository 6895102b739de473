"""Student Service 도메인 서비스 레이어입니다. 관리자용 학생 명부 관리와 차수 소속 변경 흐름을 캡슐화합니다."""

import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config import settings
from app.models.batch import Batch
from app.models.user import User
from app.schemas.user import StudentCreate, StudentUpdate
from app.services.batch_service import recount_students
from app.utils.errors import ConcurrentUpdateError, ConflictError, NotFoundError, ValidationError
from app.utils.permissions import STUDENT
from app.utils.security import hash_password
from app.utils.transaction import write_transaction

logger = logging.getLogger(__name__)

STUDENT_SORT_FIELDS = {
    "name": User.name,
    "email": User.email,
    "student_id": User.student_id,
    "year": User.year,
    "created_at": User.created_at,
}


def _normalize_email(email) -> str:
    return str(email or "").strip().lower()


def _ensure_unique_identity(
    db: Session,
    email: Optional[str] = None,
    student_id: Optional[str] = None,
    exclude_user_id: Optional[int] = None,
):
    if email:
        q = db.query(User).filter(User.email == email)
        if exclude_user_id is not None:
            q = q.filter(User.user_id != exclude_user_id)
        if q.first():
            raise ConflictError("이미 존재하는 이메일입니다.")
    if student_id:
        q = db.query(User).filter(User.student_id == student_id)
        if exclude_user_id is not None:
            q = q.filter(User.user_id != exclude_user_id)
        if q.first():
            raise ConflictError("이미 존재하는 학번입니다.")


def _get_membership_batch(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.batch_id == batch_id).first()
    if not batch:
        raise ValidationError("존재하지 않는 차수입니다.")
    return batch


def list_students(
    db: Session,
    batch_id: Optional[int] = None,
    is_alumni: Optional[bool] = None,
    course: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc",
) -> List[User]:
    q = db.query(User).filter(User.role == STUDENT)
    if batch_id is not None:
        q = q.filter(User.batch_id == batch_id)
    if is_alumni is not None:
        q = q.filter(User.is_alumni == is_alumni)
    if course:
        q = q.filter(User.course.ilike(f"%{course.strip()}%"))
    if department:
        q = q.filter(User.department.ilike(f"%{department.strip()}%"))
    if search:
        keyword = f"%{search.strip()}%"
        q = q.filter(or_(User.name.ilike(keyword), User.email.ilike(keyword), User.student_id.ilike(keyword)))

    column = STUDENT_SORT_FIELDS.get(sort_by or "name", User.name)
    ordering = column.desc() if sort_order == "desc" else column.asc()
    return q.order_by(ordering, User.user_id.asc()).all()


def get_student(db: Session, user_id: int) -> User:
    student = db.query(User).filter(User.user_id == user_id).first()
    if not student or student.role != STUDENT:
        raise NotFoundError("학생을 찾을 수 없습니다.")
    return student


def _retry_membership_change(label: str, action):
    """차수 version 충돌로 실패한 소속 변경을 처음부터 다시 수행한다.

    write_transaction 이 이미 rollback 했으므로 action 은 매번 최신 상태를 다시 읽는다.
    """
    attempts = max(1, settings.MEMBERSHIP_UPDATE_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        try:
            return action()
        except ConcurrentUpdateError:
            if attempt == attempts:
                raise
            logger.warning("[student] %s hit a concurrent batch change (attempt %s/%s)", label, attempt, attempts)


def create_student(db: Session, data: StudentCreate) -> User:
    email = _normalize_email(data.email)
    student_id = data.student_id.strip()
    if not student_id:
        raise ValidationError("학번은 비워둘 수 없습니다.")
    _ensure_unique_identity(db, email=email, student_id=student_id)
    password_hash = hash_password(data.password)

    def action():
        batch = _get_membership_batch(db, data.batch_id)
        student = User(
            name=data.name.strip(),
            email=email,
            password_hash=password_hash,
            role=STUDENT,
            student_id=student_id,
            batch_id=batch.batch_id,
            course=data.course.strip(),
            department=data.department.strip(),
            year=data.year,
            phone=data.phone,
            # 이미 완료된 차수에 추가되는 학생은 곧바로 동문이다.
            is_alumni=bool(data.is_alumni or batch.is_completed),
            current_status="studying",
        )
        student.skills = []
        student.achievements = []
        with write_transaction(db, "student"):
            db.add(student)
            recount_students(db, batch.batch_id)
        return student

    student = _retry_membership_change(f"create {student_id}", action)
    db.refresh(student)
    logger.info(
        "[student] created student %s in batch %s (alumni=%s)", student.user_id, student.batch_id, student.is_alumni
    )
    return student


def update_student(db: Session, user_id: int, data: StudentUpdate) -> User:
    get_student(db, user_id)
    payload = data.model_dump(exclude_none=True)

    if "email" in payload:
        payload["email"] = _normalize_email(payload["email"])
        _ensure_unique_identity(db, email=payload["email"], exclude_user_id=user_id)
    if "student_id" in payload:
        payload["student_id"] = payload["student_id"].strip()
        if not payload["student_id"]:
            raise ValidationError("학번은 비워둘 수 없습니다.")
        _ensure_unique_identity(db, student_id=payload["student_id"], exclude_user_id=user_id)

    def action():
        student = get_student(db, user_id)
        previous_batch_id = student.batch_id
        target_batch = None
        if "batch_id" in payload and payload["batch_id"] != previous_batch_id:
            target_batch = _get_membership_batch(db, payload["batch_id"])

        with write_transaction(db, "student"):
            for key, value in payload.items():
                setattr(student, key, value)
            if target_batch is not None:
                if target_batch.is_completed and not student.is_alumni:
                    student.is_alumni = True
                if previous_batch_id is not None:
                    recount_students(db, previous_batch_id)
                recount_students(db, target_batch.batch_id)
        if target_batch is not None:
            logger.info(
                "[student] moved student %s from batch %s to batch %s",
                user_id,
                previous_batch_id,
                target_batch.batch_id,
            )
        return student

    student = _retry_membership_change(f"update {user_id}", action)
    db.refresh(student)
    return student


def delete_student(db: Session, user_id: int):
    def action():
        student = get_student(db, user_id)
        former_batch_id = student.batch_id
        with write_transaction(db, "student"):
            db.delete(student)
            if former_batch_id is not None:
                recount_students(db, former_batch_id)
        return former_batch_id

    former_batch_id = _retry_membership_change(f"delete {user_id}", action)
    logger.info("[student] deleted student %s from batch %s", user_id, former_batch_id)
