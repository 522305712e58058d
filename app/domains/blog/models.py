# app/domains/blog/models.py

"""
'blog' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Text
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field

from app.domains.media.models import ContentRecordBase, MediaAssetBase, TimestampMixin


# =============================================================================
# 1. blog_articles 테이블 모델
# =============================================================================
class BlogArticleBase(ContentRecordBase):
    title: str = Field(max_length=255, description="글 제목")
    subtitle: Optional[str] = Field(default=None, max_length=500, description="부제목")
    content: str = Field(default="", sa_type=Text, description="본문 (HTML)")
    slug: str = Field(max_length=255, unique=True, index=True, description="URL용 고유 식별자")
    published_at: Optional[datetime] = Field(
        default=None, sa_type=TIMESTAMP(timezone=True), description="최초 공개 일시"
    )


class BlogArticle(BlogArticleBase, TimestampMixin, table=True):
    __tablename__ = "blog_articles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


# =============================================================================
# 2. blog_article_images 테이블 모델
# =============================================================================
class BlogArticleImage(MediaAssetBase, table=True):
    """is_primary 이미지가 글의 커버 이미지입니다."""
    __tablename__ = "blog_article_images"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    parent_id: uuid.UUID = Field(foreign_key="blog_articles.id", ondelete="CASCADE", index=True, description="글 ID")
