"""Uploads 기능 API 라우터입니다. 프로필 사진과 이력서 파일을 저장하고 URL을 사용자 정보에 기록합니다."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.upload import ProfilePictureOut, ResumeOut
from app.services import upload_service

router = APIRouter(prefix="/api/uploads", tags=["uploads"])


@router.post("/profile-picture", response_model=ProfilePictureOut)
async def upload_profile_picture(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    url = await upload_service.upload_profile_picture(db, current_user, file)
    return ProfilePictureOut(message="프로필 사진이 업로드되었습니다.", profile_picture=url)


@router.delete("/profile-picture")
def delete_profile_picture(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    upload_service.delete_profile_picture(db, current_user)
    return {"message": "프로필 사진이 삭제되었습니다."}


@router.post("/resume", response_model=ResumeOut)
async def upload_resume(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    url = await upload_service.upload_resume(db, current_user, file)
    return ResumeOut(message="이력서가 업로드되었습니다.", resume=url)


@router.delete("/resume")
def delete_resume(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    upload_service.delete_resume(db, current_user)
    return {"message": "이력서가 삭제되었습니다."}
