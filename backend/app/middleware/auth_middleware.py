"""Bearer 토큰으로 요청 사용자를 식별하고 역할별 접근을 제한하는 의존성입니다."""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from app.database import get_db
from app.models.user import User
from app.config import settings
from app.services.auth_service import ALGORITHM
from app.utils.permissions import ADMIN, STUDENT

security = HTTPBearer()

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("토큰이 유효하지 않거나 만료되었습니다.")


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_token(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("토큰 정보가 올바르지 않습니다.")

    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise _unauthorized("사용자를 찾을 수 없습니다.")
    # 발급 이후 역할이 바뀐 토큰은 재로그인을 요구한다.
    token_role = payload.get("role")
    if token_role is not None and token_role != user.role:
        logger.info("[auth] rejected token for user %s: role %s -> %s", user_id, token_role, user.role)
        raise _unauthorized("권한 정보가 변경되었습니다. 다시 로그인해 주세요.")
    return user


def require_roles(*roles: str):
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(roles)}",
            )
        return current_user
    return checker


require_admin = require_roles(ADMIN)
require_student = require_roles(STUDENT)
