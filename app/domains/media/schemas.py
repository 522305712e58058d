# app/domains/media/schemas.py

"""
'media' 코어에서 사용하는 입력/출력 스키마를 정의하는 모듈입니다.

- AssetInput: HTTP 계층이 검증을 마친 업로드 한 건 (바이트 소스 + 메타데이터)
- MediaBundle: 부모 레코드와 position 오름차순으로 정렬된 자산 목록
- MediaAssetRead / MediaAssetUpdate: 자산 응답 및 메타데이터 수정용 스키마
"""
import uuid
from typing import Any, Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# 1. 코디네이터 입력/출력
# =============================================================================
class AssetInput(BaseModel):
    """
    저장할 이미지 한 건에 대한 설명입니다.
    source는 bytes, 동기 파일 객체(read()), 또는 비동기 read()를 가진 객체(UploadFile)일 수 있습니다.
    개수/크기/형식 제한은 호출 계층에서 이미 확인되었다고 가정합니다.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: Any = Field(..., description="파일 바이트 소스")
    original_name: str = Field(..., description="클라이언트가 보낸 원본 파일명 (확장자 보존용)")
    mime_type: str = Field(..., description="MIME 타입")
    size: Optional[int] = Field(None, description="바이트 크기")
    alt_text: Optional[str] = Field(None, max_length=255, description="대체 텍스트")
    # 도메인별 추가 자산 컬럼 (예: 상품 이미지의 show_on_home)
    attributes: Dict[str, Any] = Field(default_factory=dict)


class MediaBundle(BaseModel):
    """부모 레코드와 정렬된 자산 목록을 함께 반환하기 위한 컨테이너입니다."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    record: Any
    assets: List[Any] = Field(default_factory=list)


# =============================================================================
# 2. 자산 응답 / 수정 스키마
# =============================================================================
class MediaAssetRead(BaseModel):
    """
    자산 정보를 클라이언트에 응답하기 위한 Pydantic 모델입니다.
    """
    id: uuid.UUID
    parent_id: uuid.UUID
    url: str
    filename: str
    alt_text: Optional[str] = None
    is_primary: bool
    position: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MediaAssetUpdate(BaseModel):
    """
    자산 메타데이터 수정용 모델입니다. 저장된 파일은 건드리지 않습니다.
    모든 필드는 선택 사항입니다 (부분 업데이트).
    """
    alt_text: Optional[str] = Field(None, max_length=255)
    is_primary: Optional[bool] = None
    position: Optional[int] = Field(None, ge=0)
