# app/domains/blog/schemas.py

"""
'blog' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.
"""

import uuid
from datetime import datetime
from typing import Optional, List

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.media.schemas import MediaAssetRead, MediaAssetUpdate


class BlogArticleCreate(SQLModel):
    """
    새 글 생성용 모델입니다. slug를 비워두면 제목으로부터 생성됩니다.
    """
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=500)
    content: str = ""
    slug: Optional[str] = Field(None, max_length=255)
    published: bool = False
    sort_order: int = 0


class BlogArticleUpdate(SQLModel):
    """
    글 수정용 모델입니다. 모든 필드는 선택 사항입니다.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=500)
    content: Optional[str] = None
    slug: Optional[str] = Field(None, max_length=255)
    published: Optional[bool] = None
    sort_order: Optional[int] = None


class BlogArticleImageRead(MediaAssetRead):
    pass


class BlogArticleImageUpdate(MediaAssetUpdate):
    pass


class BlogArticleRead(SQLModel):
    id: uuid.UUID
    title: str
    subtitle: Optional[str] = None
    content: str
    slug: str
    published: bool
    published_at: Optional[datetime] = None
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    cover_image: Optional[BlogArticleImageRead] = None
    images: List[BlogArticleImageRead] = []
