# app/domains/about/models.py

"""
'about' 도메인 (소개 페이지 섹션)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

import uuid
from typing import List

from sqlalchemy import JSON
from sqlmodel import Field

from app.domains.media.models import ContentRecordBase, MediaAssetBase, TimestampMixin


# =============================================================================
# 1. about_sections 테이블 모델
# =============================================================================
class AboutSectionBase(ContentRecordBase):
    title: str = Field(max_length=255, description="섹션 제목")
    paragraphs: List[str] = Field(default_factory=list, sa_type=JSON, description="문단 목록 (JSON 배열)")


class AboutSection(AboutSectionBase, TimestampMixin, table=True):
    __tablename__ = "about_sections"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


# =============================================================================
# 2. about_section_images 테이블 모델
# =============================================================================
class AboutSectionImage(MediaAssetBase, table=True):
    """섹션당 한 장만 존재합니다. 대체 텍스트는 alt_text에 저장됩니다."""
    __tablename__ = "about_section_images"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    parent_id: uuid.UUID = Field(foreign_key="about_sections.id", ondelete="CASCADE", index=True, description="섹션 ID")
