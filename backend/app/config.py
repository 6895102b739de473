"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./campus_alumni.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 7 * 24 * 60

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # 관리자 계정은 기본적으로 공개 가입을 막고 시드/관리 스크립트로만 만든다.
    ALLOW_ADMIN_REGISTRATION: bool = False

    # 차수 완료 처리 중 동시 수정이 감지되면 전체 작업을 재시도한다.
    BATCH_COMPLETION_MAX_ATTEMPTS: int = 3
    # 학생 추가, 소속 변경, 삭제도 같은 방식으로 재시도한다.
    MEMBERSHIP_UPDATE_MAX_ATTEMPTS: int = 3

    # File upload
    UPLOAD_DIR: str = "uploads"
    MAX_PROFILE_PICTURE_SIZE: int = 5 * 1024 * 1024  # 5 MB
    MAX_RESUME_SIZE: int = 10 * 1024 * 1024  # 10 MB
    PROFILE_PICTURE_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "gif"]
    RESUME_EXTENSIONS: List[str] = ["pdf", "doc", "docx"]

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
