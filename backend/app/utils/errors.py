"""서비스 레이어에서 발생시키는 도메인 오류 유형입니다.

모두 ``HTTPException`` 을 상속하므로 서비스 함수가 직접 raise 하면 FastAPI가
그대로 HTTP 응답으로 변환합니다.
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConflictError(HTTPException):
    """이메일, 학번, 차수명 등 고유값 중복."""

    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class ConcurrentUpdateError(ConflictError):
    """동일 차수에 대한 동시 수정으로 낙관적 잠금 검사가 실패한 경우."""

    def __init__(self, detail: str = "다른 요청과 동시에 변경되었습니다. 잠시 후 다시 시도해 주세요."):
        super().__init__(detail, status_code=status.HTTP_409_CONFLICT)


class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "이 작업을 수행할 권한이 없습니다."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class StorageError(HTTPException):
    # 저장소 내부 오류 내용은 호출자에게 노출하지 않는다.
    def __init__(self, detail: str = "데이터 저장 중 오류가 발생했습니다."):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
