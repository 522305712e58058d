# app/domains/pages/models.py

"""
'pages' 도메인 (CMS 페이지 섹션)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

`metadata`는 SQLAlchemy 선언 모델의 예약 속성이므로 섹션별 추가 설정은 `meta` 컬럼에 저장합니다.
"""

import uuid
from typing import Optional, Dict, Any

from sqlalchemy import JSON, Text, UniqueConstraint
from sqlmodel import Field

from app.domains.media.models import ContentRecordBase, MediaAssetBase, TimestampMixin


# =============================================================================
# 1. page_sections 테이블 모델
# =============================================================================
class PageSectionBase(ContentRecordBase):
    page: str = Field(max_length=100, index=True, description="페이지 키 (예: home, about)")
    section: str = Field(max_length=100, description="페이지 내 섹션 키 (예: hero, story)")
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None, sa_type=Text)
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON, description="섹션별 추가 설정 (JSON)")


class PageSection(PageSectionBase, TimestampMixin, table=True):
    __tablename__ = "page_sections"
    __table_args__ = (UniqueConstraint("page", "section", name="uq_page_sections_page_section"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


# =============================================================================
# 2. page_section_images 테이블 모델
# =============================================================================
class PageSectionImage(MediaAssetBase, table=True):
    __tablename__ = "page_section_images"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    parent_id: uuid.UUID = Field(foreign_key="page_sections.id", ondelete="CASCADE", index=True, description="섹션 ID")
