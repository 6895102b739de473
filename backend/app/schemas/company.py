"""Company 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime


class CompanyBase(BaseModel):
    company_name: str = Field(min_length=1, max_length=200)
    contact_email: EmailStr
    contact_person: str = Field(min_length=1, max_length=100)
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None


class CompanyCreate(CompanyBase):
    pass


class CompanyShareCreate(BaseModel):
    batch_id: int
    message: Optional[str] = None


class CompanyShareOut(BaseModel):
    share_id: int
    company_id: int
    batch_id: int
    batch_name: Optional[str] = None
    message: Optional[str]
    student_ids: List[int] = Field(default_factory=list)
    shared_at: datetime

    model_config = {"from_attributes": True}


class CompanyOut(CompanyBase):
    company_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class CompanyDetailOut(CompanyOut):
    shares: List[CompanyShareOut] = Field(default_factory=list)


class ShareStudentsOut(BaseModel):
    message: str
    shared_students: int
    share: CompanyShareOut
