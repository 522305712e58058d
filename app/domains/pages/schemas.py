# app/domains/pages/schemas.py

"""
'pages' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.media.schemas import MediaAssetRead, MediaAssetUpdate
from .models import PageSectionBase


class PageSectionCreate(PageSectionBase):
    """`page`와 `section`은 필수이며, 두 값의 조합은 고유해야 합니다."""
    pass


class PageSectionUpdate(SQLModel):
    page: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None
    published: Optional[bool] = None
    sort_order: Optional[int] = None


class PageSectionImageRead(MediaAssetRead):
    pass


class PageSectionImageUpdate(MediaAssetUpdate):
    pass


class PageSectionRead(PageSectionBase):
    id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    images: List[PageSectionImageRead] = []
