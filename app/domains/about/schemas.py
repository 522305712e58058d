# app/domains/about/schemas.py

"""
'about' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.
"""

import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel
from pydantic import Field, field_validator

from app.domains.media.schemas import MediaAssetRead


def _check_paragraphs(value: Optional[List[str]]) -> Optional[List[str]]:
    if value is not None and any(not p or not p.strip() for p in value):
        raise ValueError("paragraphs must not contain empty strings")
    return value


class AboutSectionCreate(SQLModel):
    """
    섹션 생성용 모델입니다. 이미지는 multipart 필드 `image`로 별도 전달됩니다.
    """
    title: str = Field(..., min_length=1, max_length=255)
    paragraphs: List[str] = Field(..., min_length=1)
    published: bool = False
    sort_order: int = Field(0, ge=0)

    @field_validator("paragraphs")
    @classmethod
    def paragraphs_not_empty(cls, value):
        return _check_paragraphs(value)


class AboutSectionUpdate(SQLModel):
    """텍스트 필드만 수정합니다. 이미지는 `PATCH /{id}/image`로 교체합니다."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    paragraphs: Optional[List[str]] = Field(None, min_length=1)
    published: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("paragraphs")
    @classmethod
    def paragraphs_not_empty(cls, value):
        return _check_paragraphs(value)


class AboutSectionImageRead(MediaAssetRead):
    pass


class AboutSectionRead(SQLModel):
    id: uuid.UUID
    title: str
    paragraphs: List[str] = []
    published: bool
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    image: Optional[AboutSectionImageRead] = None
