"""Batch 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime


class BatchBase(BaseModel):
    batch_name: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1900, le=2100)
    course: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=100)
    start_date: date
    end_date: date
    description: Optional[str] = None


class BatchCreate(BatchBase):
    pass


class BatchUpdate(BaseModel):
    # 완료 여부와 학생 수는 전용 작업으로만 변경된다.
    batch_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)
    course: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department: Optional[str] = Field(default=None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None


class BatchOut(BatchBase):
    batch_id: int
    is_completed: bool
    completed_date: Optional[datetime]
    total_students: int
    created_at: datetime
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class BatchSummaryOut(BaseModel):
    batch_id: int
    batch_name: str
    year: int
    course: str
    department: str

    model_config = {"from_attributes": True}


class BatchCompletionOut(BaseModel):
    message: str
    batch: BatchOut
    converted_count: int
