"""Company Service 도메인 서비스 레이어입니다. 협력 기업 관리와 학생 명단 공유 이력을 캡슐화합니다."""

import json
import logging
from datetime import datetime, timezone
from typing import List, Tuple

from sqlalchemy.orm import Session

from app.models.batch import Batch
from app.models.company import Company, CompanyShare
from app.models.user import User
from app.schemas.company import CompanyCreate, CompanyShareCreate
from app.utils.errors import NotFoundError
from app.utils.permissions import STUDENT
from app.utils.transaction import write_transaction

logger = logging.getLogger(__name__)


def list_companies(db: Session) -> List[Company]:
    return db.query(Company).order_by(Company.company_name.asc()).all()


def get_company(db: Session, company_id: int) -> Company:
    company = db.query(Company).filter(Company.company_id == company_id).first()
    if not company:
        raise NotFoundError("기업을 찾을 수 없습니다.")
    return company


def create_company(db: Session, data: CompanyCreate) -> Company:
    payload = data.model_dump()
    payload["company_name"] = payload["company_name"].strip()
    payload["contact_email"] = str(payload["contact_email"]).strip().lower()
    payload["contact_person"] = payload["contact_person"].strip()
    company = Company(**payload)
    with write_transaction(db, "company"):
        db.add(company)
    db.refresh(company)
    return company


def share_students(db: Session, company_id: int, data: CompanyShareCreate) -> Tuple[CompanyShare, int]:
    """공유 시점의 차수 학생 명단을 스냅샷으로 기록한다. 이후 명단이 바뀌어도 기록은 그대로다."""
    company = get_company(db, company_id)
    batch = db.query(Batch).filter(Batch.batch_id == data.batch_id).first()
    if not batch:
        raise NotFoundError("차수를 찾을 수 없습니다.")

    student_ids = [
        row[0]
        for row in db.query(User.user_id)
        .filter(User.batch_id == batch.batch_id, User.role == STUDENT)
        .order_by(User.user_id.asc())
        .all()
    ]
    message = (data.message or "").strip() or f"Student list for {batch.batch_name}"
    share = CompanyShare(
        company_id=company.company_id,
        batch_id=batch.batch_id,
        message=message,
        student_ids_json=json.dumps(student_ids),
        shared_at=datetime.now(timezone.utc),
    )
    with write_transaction(db, "company"):
        db.add(share)
    db.refresh(share)
    logger.info(
        "[company] shared %s students of batch %s with company %s",
        len(student_ids),
        batch.batch_id,
        company.company_id,
    )
    return share, len(student_ids)
