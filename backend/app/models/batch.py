"""Batch(졸업 기수) 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Batch(Base):
    __tablename__ = "batch"

    batch_id = Column(Integer, primary_key=True, autoincrement=True)
    batch_name = Column(String(100), unique=True, nullable=False)
    year = Column(Integer, nullable=False)
    course = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    description = Column(Text)
    is_completed = Column(Boolean, default=False, nullable=False)
    completed_date = Column(DateTime)  # is_completed 와 항상 함께 설정
    total_students = Column(Integer, default=0, nullable=False)  # 재계산되는 캐시 값
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    students = relationship("User", back_populates="batch")
    shares = relationship("CompanyShare", back_populates="batch")

    # ORM을 통한 모든 UPDATE는 version 일치 여부를 검사한다.
    __mapper_args__ = {"version_id_col": version}
