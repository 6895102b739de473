"""Upload 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel


class ProfilePictureOut(BaseModel):
    message: str
    profile_picture: str


class ResumeOut(BaseModel):
    message: str
    resume: str
