"""Company 및 학생 명단 공유 이력 모델 정의입니다."""

import json

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Company(Base):
    __tablename__ = "company"

    company_id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(200), nullable=False)
    contact_email = Column(String(255), nullable=False)
    contact_person = Column(String(100), nullable=False)
    contact_phone = Column(String(30))
    website = Column(String(500))
    description = Column(Text)
    industry = Column(String(100))
    location = Column(String(200))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    shares = relationship(
        "CompanyShare",
        back_populates="company",
        order_by="CompanyShare.share_id",
        cascade="all, delete-orphan",
    )


class CompanyShare(Base):
    """공유 시점의 차수 학생 명단 스냅샷. 추가만 가능하며 이후 재계산하지 않는다."""

    __tablename__ = "company_share"

    share_id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(Integer, ForeignKey("company.company_id"), nullable=False)
    batch_id = Column(Integer, ForeignKey("batch.batch_id"), nullable=False)
    message = Column(Text)
    student_ids_json = Column("student_ids", Text, nullable=False, default="[]")
    shared_at = Column(DateTime, server_default=func.now())

    company = relationship("Company", back_populates="shares")
    batch = relationship("Batch", back_populates="shares")

    __table_args__ = (
        Index("idx_company_share_company", "company_id"),
    )

    @property
    def student_ids(self):
        try:
            parsed = json.loads(self.student_ids_json or "[]")
        except json.JSONDecodeError:
            return []
        return [int(item) for item in parsed] if isinstance(parsed, list) else []

    @property
    def batch_name(self):
        return self.batch.batch_name if self.batch else None
