"""Alumni Service 도메인 서비스 레이어입니다. 학생 본인 프로필 수정과 동문 디렉터리 조회를 담당합니다."""

import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.user import User
from app.schemas.user import StudentProfileUpdate
from app.utils.errors import NotFoundError
from app.utils.permissions import STUDENT, split_profile_update
from app.utils.transaction import write_transaction

logger = logging.getLogger(__name__)

ALUMNI_SORT_FIELDS = {
    "name": User.name,
    "year": User.year,
    "company": User.company,
    "job_role": User.job_role,
    "created_at": User.created_at,
}

TOP_COMPANY_LIMIT = 5


def update_profile(db: Session, current_user: User, data: StudentProfileUpdate) -> User:
    """필드별 쓰기 정책을 통과한 값만 반영한다. 허용되지 않은 필드는 조용히 제외한다."""
    requested = {
        key: value
        for key, value in data.model_dump(exclude_unset=True, mode="json").items()
        if value is not None
    }
    allowed, denied = split_profile_update(current_user, requested)
    if denied:
        logger.info(
            "[profile] user %s (alumni=%s) dropped non-writable fields: %s",
            current_user.user_id,
            current_user.is_alumni,
            ", ".join(sorted(denied)),
        )

    with write_transaction(db, "profile"):
        for key, value in allowed.items():
            setattr(current_user, key, value)
    db.refresh(current_user)
    return current_user


def _alumni_query(db: Session):
    return db.query(User).filter(User.role == STUDENT, User.is_alumni == True)  # noqa: E712


def list_alumni(
    db: Session,
    batch_id: Optional[int] = None,
    company: Optional[str] = None,
    course: Optional[str] = None,
    department: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "asc",
) -> List[User]:
    q = _alumni_query(db)
    if batch_id is not None:
        q = q.filter(User.batch_id == batch_id)
    if company:
        q = q.filter(User.company.ilike(f"%{company.strip()}%"))
    if course:
        q = q.filter(User.course.ilike(f"%{course.strip()}%"))
    if department:
        q = q.filter(User.department.ilike(f"%{department.strip()}%"))
    if search:
        keyword = f"%{search.strip()}%"
        q = q.filter(
            or_(
                User.name.ilike(keyword),
                User.job_role.ilike(keyword),
                User.company.ilike(keyword),
                User.skills_json.ilike(keyword),
            )
        )

    column = ALUMNI_SORT_FIELDS.get(sort_by or "name", User.name)
    ordering = column.desc() if sort_order == "desc" else column.asc()
    return q.order_by(ordering, User.user_id.asc()).all()


def get_alumni(db: Session, user_id: int) -> User:
    alumni = _alumni_query(db).filter(User.user_id == user_id).first()
    if not alumni:
        # 존재하지 않는 사용자와 동문이 아닌 학생을 구분하지 않는다.
        raise NotFoundError("동문을 찾을 수 없습니다.")
    return alumni


def list_alumni_companies(db: Session) -> List[str]:
    rows = (
        _alumni_query(db)
        .filter(User.company.isnot(None), User.company != "")
        .with_entities(User.company)
        .distinct()
        .order_by(User.company.asc())
        .all()
    )
    return [row[0] for row in rows]


def list_batch_mates(db: Session, current_user: User) -> List[User]:
    if current_user.batch_id is None:
        return []
    return (
        db.query(User)
        .filter(
            User.batch_id == current_user.batch_id,
            User.role == STUDENT,
            User.user_id != current_user.user_id,
        )
        .order_by(User.name.asc())
        .all()
    )


def get_student_stats(db: Session, current_user: User) -> dict:
    batch_mates = 0
    batch_alumni = 0
    if current_user.batch_id is not None:
        batch_q = db.query(User).filter(User.batch_id == current_user.batch_id, User.role == STUDENT)
        batch_mates = batch_q.filter(User.user_id != current_user.user_id).count()
        batch_alumni = batch_q.filter(User.is_alumni == True).count()  # noqa: E712

    top_rows = (
        _alumni_query(db)
        .filter(User.company.isnot(None), User.company != "")
        .with_entities(User.company, func.count(User.user_id).label("count"))
        .group_by(User.company)
        .order_by(func.count(User.user_id).desc(), User.company.asc())
        .limit(TOP_COMPANY_LIMIT)
        .all()
    )
    return {
        "is_alumni": bool(current_user.is_alumni),
        "batch_mates": batch_mates,
        "batch_alumni": batch_alumni,
        "total_alumni": _alumni_query(db).count(),
        "top_companies": [{"company": row[0], "count": row[1]} for row in top_rows],
    }
