"""User 도메인의 SQLAlchemy 모델 정의입니다."""

import json

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")  # admin/student
    phone = Column(String(30))
    profile_picture = Column(String(500), default="")
    resume = Column(String(500), default="")

    # Student fields
    student_id = Column(String(50), unique=True)
    batch_id = Column(Integer, ForeignKey("batch.batch_id"))
    course = Column(String(100))
    department = Column(String(100))
    year = Column(Integer)

    # Alumni fields
    is_alumni = Column(Boolean, default=False, nullable=False)
    job_role = Column(String(100), default="")
    company = Column(String(200), default="")
    work_location = Column(String(200), default="")
    salary = Column(Integer, default=0)
    experience = Column(Text, default="")
    skills_json = Column("skills", Text)  # JSON list[str]
    achievements_json = Column("achievements", Text)  # JSON list[{title, description, date}]
    linkedin_profile = Column(String(500), default="")
    github_profile = Column(String(500), default="")
    portfolio_website = Column(String(500), default="")
    current_status = Column(String(30), default="studying")

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    batch = relationship("Batch", back_populates="students")

    __table_args__ = (
        Index("idx_users_batch_role", "batch_id", "role"),
    )

    @staticmethod
    def _load_list(raw):
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            return []
        return parsed if isinstance(parsed, list) else []

    @property
    def skills(self):
        return [str(item) for item in self._load_list(self.skills_json) if str(item).strip()]

    @skills.setter
    def skills(self, value):
        self.skills_json = json.dumps([str(item).strip() for item in (value or []) if str(item).strip()])

    @property
    def achievements(self):
        return [item for item in self._load_list(self.achievements_json) if isinstance(item, dict)]

    @achievements.setter
    def achievements(self, value):
        self.achievements_json = json.dumps(list(value or []), ensure_ascii=False)

    @property
    def batch_name(self):
        return self.batch.batch_name if self.batch else None
