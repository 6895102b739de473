"""역할 판별과 학생 프로필 필드 쓰기 정책을 담은 공용 유틸리티입니다."""

from typing import Any, Callable, Dict, List, Tuple

from app.models.user import User


ADMIN = "admin"
STUDENT = "student"

ALL_ROLES = (ADMIN, STUDENT)


def is_admin(user: User) -> bool:
    return user.role == ADMIN


def is_student(user: User) -> bool:
    return user.role == STUDENT


def is_alumni(user: User) -> bool:
    return is_student(user) and bool(user.is_alumni)


def _always(user: User) -> bool:
    return True


# 필드명 -> 학생 본인이 해당 필드를 쓸 수 있는지 판정하는 조건.
# 여기에 없는 필드(is_alumni, batch_id, email 등)는 본인 수정 대상이 아니다.
PROFILE_FIELD_POLICY: Dict[str, Callable[[User], bool]] = {
    "phone": _always,
    "linkedin_profile": _always,
    "github_profile": _always,
    "portfolio_website": _always,
    "skills": _always,
    "job_role": is_alumni,
    "company": is_alumni,
    "work_location": is_alumni,
    "salary": is_alumni,
    "experience": is_alumni,
    "achievements": is_alumni,
    "current_status": is_alumni,
}

ALWAYS_EDITABLE_FIELDS = frozenset(k for k, rule in PROFILE_FIELD_POLICY.items() if rule is _always)
ALUMNI_ONLY_FIELDS = frozenset(k for k, rule in PROFILE_FIELD_POLICY.items() if rule is is_alumni)


def authorize_field_write(user: User, field_name: str) -> bool:
    if not is_student(user):
        return False
    rule = PROFILE_FIELD_POLICY.get(field_name)
    if rule is None:
        return False
    return rule(user)


def split_profile_update(user: User, payload: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """요청 payload를 허용 필드와 거부된 필드명 목록으로 나눈다."""
    allowed: Dict[str, Any] = {}
    denied: List[str] = []
    for field_name, value in payload.items():
        if authorize_field_write(user, field_name):
            allowed[field_name] = value
        else:
            denied.append(field_name)
    return allowed, denied
