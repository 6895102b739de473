"""서비스 쓰기 작업을 하나의 트랜잭션으로 묶고 저장소 오류를 도메인 오류로 변환합니다."""

import logging
from contextlib import contextmanager

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.utils.errors import ConcurrentUpdateError, ConflictError, StorageError

logger = logging.getLogger(__name__)


@contextmanager
def write_transaction(db: Session, area: str):
    """블록 안의 변경을 한 번에 commit 한다. 실패하면 전부 rollback 한다."""
    try:
        yield
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except StaleDataError as exc:
        db.rollback()
        logger.warning("[%s] concurrent batch modification detected: %s", area, exc)
        raise ConcurrentUpdateError() from exc
    except IntegrityError as exc:
        db.rollback()
        logger.warning("[%s] integrity error: %s", area, exc.orig)
        raise ConflictError("이미 등록된 값과 중복됩니다.") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("[%s] storage failure", area)
        raise StorageError() from exc
