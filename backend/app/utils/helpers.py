import os
import uuid
from typing import Iterable
from fastapi import UploadFile, HTTPException
from app.config import settings


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""


def validate_file(file: UploadFile, allowed_extensions: Iterable[str]) -> str:
    allowed = {ext.lower() for ext in allowed_extensions}
    ext = _extension(file.filename or "")
    if ext not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"File type '{ext}' not allowed. Allowed: {', '.join(sorted(allowed))}",
        )
    return ext


async def save_upload(file: UploadFile, subfolder: str, allowed_extensions: Iterable[str], max_size: int) -> dict:
    ext = validate_file(file, allowed_extensions)
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if len(content) > max_size:
        raise HTTPException(status_code=400, detail=f"File exceeds {max_size // (1024 * 1024)} MB limit")

    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)

    filename = f"{uuid.uuid4().hex}.{ext}"
    path = os.path.join(folder, filename)

    with open(path, "wb") as f:
        f.write(content)

    return {
        "filename": file.filename,
        "url": f"/uploads/{subfolder}/{filename}".replace("\\", "/"),
        "size": len(content),
    }


def delete_upload(url: str) -> bool:
    """``/uploads/...`` URL이 가리키는 파일을 삭제한다. 업로드 폴더 밖 경로는 무시한다."""
    if not url or not url.startswith("/uploads/"):
        return False
    root = os.path.realpath(settings.UPLOAD_DIR)
    path = os.path.realpath(os.path.join(root, url[len("/uploads/"):]))
    if not path.startswith(root + os.sep) or not os.path.isfile(path):
        return False
    os.remove(path)
    return True
