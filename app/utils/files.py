# app/utils/files.py

"""
HTTP 계층에서 업로드된 이미지 파일을 검사하고 코어가 사용하는 AssetInput으로 변환하는 유틸리티입니다.

개수, 크기, MIME 타입, 확장자-MIME 일치 여부는 여기서 확인되며,
MediaCreationCoordinator는 이 검사를 통과한 입력만 받는다고 가정합니다.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from fastapi import HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.domains.media.schemas import AssetInput

ModelT = TypeVar("ModelT", bound=BaseModel)

# MIME 타입별 허용 확장자
MIME_EXTENSIONS: Dict[str, set] = {
    "image/jpeg": {".jpg", ".jpeg"},
    "image/jpg": {".jpg", ".jpeg"},
    "image/png": {".png"},
    "image/webp": {".webp"},
}


def _upload_size(upload_file: UploadFile) -> int:
    if upload_file.size is not None:
        return upload_file.size
    #  size가 없는 경우 (직접 생성된 UploadFile) 스트림 끝으로 이동해 크기를 구합니다.
    upload_file.file.seek(0, 2)
    size = upload_file.file.tell()
    upload_file.file.seek(0)
    return size


def validate_image_uploads(
    files: Optional[Sequence[UploadFile]],
    *,
    max_files: int,
    min_files: int = 0,
) -> List[UploadFile]:
    """
    업로드된 이미지 목록을 검사합니다.

    - 개수: min_files 이상, max_files 이하 (400)
    - 크기: 파일당 MAX_UPLOAD_SIZE_BYTES 이하 (413)
    - 형식: ALLOWED_IMAGE_TYPES 에 포함된 MIME, 확장자가 MIME과 일치 (400)
    """
    files = [f for f in (files or []) if f is not None and f.filename]

    if len(files) < min_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At least {min_files} image(s) required.",
        )
    if len(files) > max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {max_files} image(s) allowed.",
        )

    for upload_file in files:
        if _upload_size(upload_file) > settings.MAX_UPLOAD_SIZE_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File '{upload_file.filename}' exceeds the {settings.MAX_UPLOAD_SIZE_BYTES} byte limit.",
            )

        content_type = (upload_file.content_type or "").lower()
        if content_type not in settings.ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported image type '{content_type}' for '{upload_file.filename}'.",
            )

        extension = Path(upload_file.filename).suffix.lower()
        if extension not in MIME_EXTENSIONS.get(content_type, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File extension '{extension}' does not match type '{content_type}'.",
            )

    return files


def to_asset_inputs(
    files: Sequence[UploadFile],
    *,
    alt_texts: Optional[Sequence[Optional[str]]] = None,
    attributes: Optional[Sequence[Dict[str, Any]]] = None,
) -> List[AssetInput]:
    """검증된 UploadFile 목록을 입력 순서대로 AssetInput 목록으로 변환합니다."""
    alt_texts = list(alt_texts or [])
    attributes = list(attributes or [])
    inputs = []
    for index, upload_file in enumerate(files):
        inputs.append(
            AssetInput(
                source=upload_file,
                original_name=upload_file.filename,
                mime_type=upload_file.content_type or "application/octet-stream",
                size=upload_file.size,
                alt_text=(alt_texts[index] or None) if index < len(alt_texts) else None,
                attributes=attributes[index] if index < len(attributes) else {},
            )
        )
    return inputs


def parse_json_field(value: Optional[str], field: str) -> Optional[Any]:
    """multipart 폼으로 전달된 JSON 문자열 필드를 파싱합니다."""
    if value is None or value == "":
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Field '{field}' must be valid JSON.",
        )


def build_form_model(model: Type[ModelT], **data: Any) -> ModelT:
    """
    폼 필드로 스키마 객체를 만듭니다.
    검증 실패는 JSON 본문과 동일하게 422 응답이 되도록 RequestValidationError로 변환합니다.
    """
    try:
        return model.model_validate({k: v for k, v in data.items() if v is not None})
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))
