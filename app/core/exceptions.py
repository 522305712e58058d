# app/core/exceptions.py

"""
미디어 자산 생명주기(생성, 추가, 교체, 삭제)에서 발생하는 오류 유형을 정의하는 모듈입니다.

코어 로직(코디네이터, 저장소, 리포지토리)은 HTTP를 알지 못하므로 HTTPException 대신
아래의 타입 있는 예외를 발생시키고, FastAPI 애플리케이션에 등록된 핸들러가
이를 `{"detail": ..., "code": ...}` 형태의 응답으로 변환합니다.

- ValidationError: 상위 계층의 검증을 통과했지만 명령의 형태가 잘못된 경우 (방어적, 드묾)
- ConflictError: 부모 레코드의 고유 키(슬러그, 이름+카테고리 등) 중복
- NotFoundError: 참조한 부모 레코드 또는 자산이 존재하지 않음
- StorageError: 파일 시스템 쓰기/삭제/디렉토리 생성 실패
- PartialSuccessError: 레코드는 생성되었지만 자산 연결에 실패함 (record_id 포함)
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MediaError(Exception):
    """모든 도메인 오류의 기본 클래스입니다."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "MEDIA_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(MediaError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        if self.field:
            body["field"] = self.field
        return body


class ConflictError(MediaError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class NotFoundError(MediaError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(f'{resource_type} with ID "{resource_id}" not found')
        self.resource_type = resource_type
        self.resource_id = resource_id


class StorageError(MediaError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"


class PartialSuccessError(MediaError):
    """
    레코드는 생성되었으나 자산 행(row) 저장에 실패한 경우입니다.
    레코드는 삭제하지 않으며, 호출자가 record_id로 자산 재연결 또는 명시적 삭제를 결정합니다.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "PARTIAL_SUCCESS"

    def __init__(self, record_id: Any, message: str, cleaned_files: Optional[List[str]] = None):
        super().__init__(message)
        self.record_id = record_id
        self.cleaned_files = cleaned_files or []

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["record_id"] = str(self.record_id)
        return body


# =============================================================================
# FastAPI 예외 핸들러 등록
# =============================================================================
def register_exception_handlers(app: FastAPI) -> None:
    """도메인 오류를 JSON 응답으로 변환하는 핸들러를 애플리케이션에 등록합니다."""

    @app.exception_handler(MediaError)
    async def media_error_handler(request: Request, exc: MediaError):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
        else:
            logger.info("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())
