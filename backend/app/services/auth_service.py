"""Auth Service 도메인 서비스 레이어입니다. 가입, 로그인, 토큰 발급 흐름을 캡슐화합니다."""

import logging
from datetime import datetime, timedelta, timezone

from jose import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.config import settings
from app.models.user import User
from app.schemas.user import RegisterRequest, StudentCreate
from app.services import student_service
from app.utils.errors import AuthorizationError, ConflictError, ValidationError
from app.utils.permissions import ADMIN
from app.utils.security import hash_password, verify_password
from app.utils.transaction import write_transaction

ALGORITHM = "HS256"

STUDENT_REQUIRED_FIELDS = ("student_id", "batch_id", "course", "department", "year")

logger = logging.getLogger(__name__)


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user.user_id), "role": user.role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == str(email).strip().lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="이메일 또는 비밀번호가 올바르지 않습니다.",
        )
    return user


def register_user(db: Session, data: RegisterRequest) -> User:
    if data.role == ADMIN:
        if not settings.ALLOW_ADMIN_REGISTRATION:
            raise AuthorizationError("관리자 계정은 공개 가입할 수 없습니다.")
        return _register_admin(db, data)

    missing = [field for field in STUDENT_REQUIRED_FIELDS if getattr(data, field) in (None, "")]
    if missing:
        raise ValidationError(f"학생 가입에 필요한 항목이 누락되었습니다: {', '.join(missing)}")

    # 자가 가입은 동문 플래그를 직접 지정할 수 없다. 완료된 차수라면 생성 시 자동 전환된다.
    try:
        payload = StudentCreate(
            name=data.name,
            email=data.email,
            password=data.password,
            student_id=data.student_id,
            batch_id=data.batch_id,
            course=data.course,
            department=data.department,
            year=data.year,
            phone=data.phone,
        )
    except PydanticValidationError as exc:
        raise ValidationError(f"학생 가입 정보가 올바르지 않습니다: {exc.errors()[0].get('msg')}") from exc
    return student_service.create_student(db, payload)


def _register_admin(db: Session, data: RegisterRequest) -> User:
    email = str(data.email).strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("이미 존재하는 이메일입니다.")
    user = User(
        name=data.name.strip(),
        email=email,
        password_hash=hash_password(data.password),
        role=ADMIN,
        phone=data.phone,
        is_alumni=False,
    )
    with write_transaction(db, "auth"):
        db.add(user)
    db.refresh(user)
    logger.info("[auth] registered admin %s", user.user_id)
    return user
