"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from datetime import date as DateType, datetime

from app.schemas.batch import BatchSummaryOut

CurrentStatus = Literal["studying", "job_searching", "employed", "entrepreneur", "higher_studies"]


class AchievementItem(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    date: Optional[DateType] = None


class StudentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    student_id: str = Field(min_length=1, max_length=50)
    batch_id: int
    course: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=100)
    year: int
    phone: Optional[str] = None
    # 일괄 등록 시 이미 졸업한 학생을 표시하기 위한 플래그
    is_alumni: bool = False


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    student_id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    batch_id: Optional[int] = None
    course: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    year: Optional[int] = None
    phone: Optional[str] = None


class StudentProfileUpdate(BaseModel):
    phone: Optional[str] = None
    linkedin_profile: Optional[str] = None
    github_profile: Optional[str] = None
    portfolio_website: Optional[str] = None
    skills: Optional[List[str]] = None
    job_role: Optional[str] = None
    company: Optional[str] = None
    work_location: Optional[str] = None
    salary: Optional[int] = Field(default=None, ge=0)
    experience: Optional[str] = None
    achievements: Optional[List[AchievementItem]] = None
    current_status: Optional[CurrentStatus] = None

    # 정의되지 않은 필드도 필드 정책 검사 대상으로 넘긴다.
    model_config = {"extra": "allow"}


class UserPublicOut(BaseModel):
    user_id: int
    name: str
    role: str
    student_id: Optional[str] = None
    batch_id: Optional[int] = None
    batch: Optional[BatchSummaryOut] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    resume: Optional[str] = None
    course: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None
    is_alumni: bool
    job_role: Optional[str] = None
    company: Optional[str] = None
    work_location: Optional[str] = None
    salary: Optional[int] = None
    experience: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    achievements: List[AchievementItem] = Field(default_factory=list)
    linkedin_profile: Optional[str] = None
    github_profile: Optional[str] = None
    portfolio_website: Optional[str] = None
    current_status: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserOut(UserPublicOut):
    email: str
    updated_at: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Literal["student", "admin"] = "student"
    phone: Optional[str] = None
    student_id: Optional[str] = None
    batch_id: Optional[int] = None
    course: Optional[str] = None
    department: Optional[str] = None
    year: Optional[int] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class StudentStatsOut(BaseModel):
    is_alumni: bool
    batch_mates: int
    batch_alumni: int
    total_alumni: int
    top_companies: List[dict] = Field(default_factory=list)
