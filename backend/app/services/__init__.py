"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    batch_service,
    student_service,
    alumni_service,
    company_service,
    upload_service,
    auth_service,
)
