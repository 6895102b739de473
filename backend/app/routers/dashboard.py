"""관리자 대시보드 집계 API 라우터입니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import require_admin
from app.models.batch import Batch
from app.models.company import Company
from app.models.user import User
from app.utils.permissions import STUDENT

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats")
def get_dashboard_stats(
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_admin),
):
    total_students = db.query(User).filter(User.role == STUDENT).count()
    total_alumni = db.query(User).filter(User.role == STUDENT, User.is_alumni == True).count()  # noqa: E712
    total_batches = db.query(Batch).count()
    completed_batches = db.query(Batch).filter(Batch.is_completed == True).count()  # noqa: E712
    return {
        "total_students": total_students,
        "current_students": total_students - total_alumni,
        "total_alumni": total_alumni,
        "total_batches": total_batches,
        "active_batches": total_batches - completed_batches,
        "completed_batches": completed_batches,
        "total_companies": db.query(Company).count(),
    }
