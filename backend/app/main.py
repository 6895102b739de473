"""FastAPI 애플리케이션 진입점. 미들웨어, API 라우터, 업로드 파일 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.database import Base, engine
import app.models  # noqa: F401 - 모델 import로 metadata 등록
from app.routers import auth, batches, students, companies, uploads, dashboard

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Campus Connect 동문 관리 시스템",
    description="졸업 차수, 학생/동문 프로필, 협력 기업을 관리하는 캠퍼스 동문 포털 API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register all routers
app.include_router(auth.router)
app.include_router(batches.router)
app.include_router(students.router)
app.include_router(companies.router)
app.include_router(uploads.router)
app.include_router(dashboard.router)


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc) or "요청"
        parts.append(f"{field}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


# 누락되거나 형식이 잘못된 입력은 도메인 검증 오류와 같은 400으로 응답한다.
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    detail = _describe_validation_errors(exc)
    logger.info("[request] invalid input on %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": f"입력값이 올바르지 않습니다. {detail}"})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("[storage] unhandled database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "데이터 저장 중 오류가 발생했습니다."})


@app.on_event("startup")
def ensure_schema():
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "Campus Connect 동문 관리 시스템"}


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
