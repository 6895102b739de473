"""Batch Service 도메인 서비스 레이어입니다. 차수 완료(동문 전환)와 학생 수 캐시 유지 규칙을 캡슐화합니다."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.models.batch import Batch
from app.models.user import User
from app.schemas.batch import BatchCreate, BatchUpdate
from app.utils.errors import ConcurrentUpdateError, ConflictError, NotFoundError, StorageError, ValidationError
from app.utils.permissions import STUDENT
from app.utils.transaction import write_transaction

logger = logging.getLogger(__name__)


def list_batches(db: Session) -> List[Batch]:
    return db.query(Batch).order_by(Batch.year.desc(), Batch.batch_name.asc()).all()


def get_batch(db: Session, batch_id: int) -> Batch:
    batch = db.query(Batch).filter(Batch.batch_id == batch_id).first()
    if not batch:
        raise NotFoundError("차수를 찾을 수 없습니다.")
    return batch


def _ensure_unique_name(db: Session, batch_name: str, exclude_batch_id: Optional[int] = None):
    q = db.query(Batch).filter(Batch.batch_name == batch_name)
    if exclude_batch_id is not None:
        q = q.filter(Batch.batch_id != exclude_batch_id)
    if q.first():
        raise ConflictError("이미 존재하는 차수명입니다.")


def _ensure_date_range(start_date, end_date):
    if start_date and end_date and end_date < start_date:
        raise ValidationError("종료일은 시작일보다 빠를 수 없습니다.")


def create_batch(db: Session, data: BatchCreate) -> Batch:
    payload = data.model_dump()
    payload["batch_name"] = payload["batch_name"].strip()
    if not payload["batch_name"]:
        raise ValidationError("차수명은 비워둘 수 없습니다.")
    _ensure_date_range(payload["start_date"], payload["end_date"])
    _ensure_unique_name(db, payload["batch_name"])

    batch = Batch(**payload, is_completed=False, completed_date=None, total_students=0)
    with write_transaction(db, "batch"):
        db.add(batch)
    db.refresh(batch)
    logger.info("[batch] created batch %s (%s)", batch.batch_id, batch.batch_name)
    return batch


def update_batch(db: Session, batch_id: int, data: BatchUpdate) -> Batch:
    batch = get_batch(db, batch_id)
    payload = data.model_dump(exclude_none=True)
    if "batch_name" in payload:
        payload["batch_name"] = payload["batch_name"].strip()
        if not payload["batch_name"]:
            raise ValidationError("차수명은 비워둘 수 없습니다.")
        _ensure_unique_name(db, payload["batch_name"], exclude_batch_id=batch_id)
    _ensure_date_range(payload.get("start_date", batch.start_date), payload.get("end_date", batch.end_date))

    with write_transaction(db, "batch"):
        for k, v in payload.items():
            setattr(batch, k, v)
    db.refresh(batch)
    return batch


def list_batch_students(db: Session, batch_id: int) -> List[User]:
    get_batch(db, batch_id)
    return (
        db.query(User)
        .filter(User.batch_id == batch_id, User.role == STUDENT)
        .order_by(User.name.asc())
        .all()
    )


def count_students(db: Session, batch_id: int) -> int:
    return (
        db.query(func.count(User.user_id))
        .filter(User.batch_id == batch_id, User.role == STUDENT)
        .scalar()
        or 0
    )


def recount_students(db: Session, batch_id: int) -> int:
    """total_students 캐시를 실제 소속 학생 수로 덮어쓴다.

    호출자의 트랜잭션 안에서 flush만 수행하며 commit은 호출자가 한다.
    증감 대신 재집계 후 덮어쓰기를 하므로, 이전 값이 어긋나 있어도 스스로 교정된다.
    version 검사로 같은 차수에 대한 동시 변경은 StaleDataError로 드러난다.
    """
    batch = db.query(Batch).filter(Batch.batch_id == batch_id).first()
    if not batch:
        # 차수 삭제 흐름은 없으므로 호출 측 로직 오류다.
        logger.error("[batch] recount requested for missing batch %s", batch_id)
        raise NotFoundError("학생 수를 재계산할 차수를 찾을 수 없습니다.")
    db.flush()
    count = count_students(db, batch_id)
    batch.total_students = count
    db.flush()
    return count


def _apply_completion(db: Session, batch: Batch) -> int:
    try:
        batch.is_completed = True
        batch.completed_date = datetime.now(timezone.utc)
        # version 검사를 먼저 통과해야 학생 전환을 진행한다.
        db.flush()
        converted = (
            db.query(User)
            .filter(
                User.batch_id == batch.batch_id,
                User.role == STUDENT,
                User.is_alumni == False,  # noqa: E712
            )
            .update({User.is_alumni: True}, synchronize_session=False)
        )
        db.commit()
    except StaleDataError:
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[batch] completion failed for batch %s", batch.batch_id)
        raise StorageError() from exc
    return converted


def complete_batch(db: Session, batch_id: int) -> Tuple[Batch, int]:
    """차수를 완료 처리하고 소속 학생 전원을 동문으로 전환한다.

    차수 플래그와 학생 플래그는 하나의 트랜잭션으로 commit 된다.
    이미 완료된 차수는 변경 없이 그대로 반환한다(completed_date 유지, 전환 재실행 없음).
    """
    attempts = max(1, settings.BATCH_COMPLETION_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        batch = get_batch(db, batch_id)
        if batch.is_completed:
            logger.info("[batch] batch %s already completed at %s", batch_id, batch.completed_date)
            return batch, 0
        try:
            converted = _apply_completion(db, batch)
        except StaleDataError:
            db.rollback()
            logger.warning(
                "[batch] batch %s changed during completion (attempt %s/%s)", batch_id, attempt, attempts
            )
            continue
        db.refresh(batch)
        logger.info("[batch] batch %s completed; %s students converted to alumni", batch_id, converted)
        return batch, converted
    raise ConcurrentUpdateError("차수 완료 처리 중 다른 변경이 계속 감지되었습니다. 다시 시도해 주세요.")


def reconcile_batches(db: Session) -> List[dict]:
    """모든 차수의 학생 수 캐시와 완료-동문 불변식을 복구한다. 여러 번 실행해도 결과가 같다."""
    report = []
    with write_transaction(db, "batch"):
        for batch in db.query(Batch).order_by(Batch.batch_id).all():
            previous_total = batch.total_students
            total = recount_students(db, batch.batch_id)
            alumni_fixed = 0
            if batch.is_completed:
                if batch.completed_date is None:
                    batch.completed_date = batch.updated_at or datetime.now(timezone.utc)
                alumni_fixed = (
                    db.query(User)
                    .filter(
                        User.batch_id == batch.batch_id,
                        User.role == STUDENT,
                        User.is_alumni == False,  # noqa: E712
                    )
                    .update({User.is_alumni: True}, synchronize_session=False)
                )
            report.append({
                "batch_id": batch.batch_id,
                "batch_name": batch.batch_name,
                "previous_total": previous_total,
                "total_students": total,
                "alumni_fixed": alumni_fixed,
            })
    for row in report:
        if row["previous_total"] != row["total_students"] or row["alumni_fixed"]:
            logger.warning("[batch] reconciled batch %s: %s", row["batch_id"], row)
    return report
