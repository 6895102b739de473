"""프로필 사진/이력서 업로드 결과 URL을 사용자 레코드에 기록합니다."""

import logging

from fastapi import UploadFile
from sqlalchemy.orm import Session

from app.config import settings
from app.models.user import User
from app.utils.errors import AuthorizationError, ValidationError
from app.utils.helpers import delete_upload, save_upload
from app.utils.permissions import is_student
from app.utils.transaction import write_transaction

logger = logging.getLogger(__name__)

PROFILE_FOLDER = "profiles"
RESUME_FOLDER = "resumes"


def _replace_url(db: Session, user: User, attr: str, url: str):
    previous = getattr(user, attr) or ""
    with write_transaction(db, "upload"):
        setattr(user, attr, url)
    db.refresh(user)
    if previous and previous != url:
        delete_upload(previous)


def _record_upload(db: Session, user: User, attr: str, saved: dict):
    user_id = user.user_id
    try:
        _replace_url(db, user, attr, saved["url"])
    except Exception:
        # URL 기록에 실패하면 방금 저장한 파일은 어디에서도 참조되지 않는다.
        delete_upload(saved["url"])
        logger.warning("[upload] removed orphaned file %s after failed update for user %s", saved["url"], user_id)
        raise


async def upload_profile_picture(db: Session, user: User, file: UploadFile) -> str:
    saved = await save_upload(
        file,
        subfolder=PROFILE_FOLDER,
        allowed_extensions=settings.PROFILE_PICTURE_EXTENSIONS,
        max_size=settings.MAX_PROFILE_PICTURE_SIZE,
    )
    _record_upload(db, user, "profile_picture", saved)
    return saved["url"]


def delete_profile_picture(db: Session, user: User):
    if not user.profile_picture:
        raise ValidationError("삭제할 프로필 사진이 없습니다.")
    _replace_url(db, user, "profile_picture", "")


def _ensure_student(user: User):
    if not is_student(user):
        raise AuthorizationError("학생만 이력서를 관리할 수 있습니다.")


async def upload_resume(db: Session, user: User, file: UploadFile) -> str:
    _ensure_student(user)
    saved = await save_upload(
        file,
        subfolder=RESUME_FOLDER,
        allowed_extensions=settings.RESUME_EXTENSIONS,
        max_size=settings.MAX_RESUME_SIZE,
    )
    _record_upload(db, user, "resume", saved)
    logger.info("[upload] user %s uploaded resume (%s bytes)", user.user_id, saved["size"])
    return saved["url"]


def delete_resume(db: Session, user: User):
    _ensure_student(user)
    if not user.resume:
        raise ValidationError("삭제할 이력서가 없습니다.")
    _replace_url(db, user, "resume", "")
