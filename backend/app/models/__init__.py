"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.batch import Batch
from app.models.company import Company, CompanyShare

__all__ = [
    "User",
    "Batch",
    "Company", "CompanyShare",
]
