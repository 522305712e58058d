# app/domains/about/crud.py

"""
'about' 도메인의 CRUD 로직과 ContentRepository 구현을 담당하는 모듈입니다.
"""

from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.media.repository import SQLContentRepository
from . import models as about_models
from . import schemas as about_schemas


class CRUDAboutSection(
    CRUDBase[
        about_models.AboutSection,
        about_schemas.AboutSectionCreate,
        about_schemas.AboutSectionUpdate
    ]
):
    def __init__(self):
        super().__init__(model=about_models.AboutSection)

    async def get_published(self, db: AsyncSession) -> List[about_models.AboutSection]:
        return await self.get_filtered(
            db,
            filters={"published": True},
            order_by=[self.model.sort_order, self.model.created_at],
            limit=None,
        )

    async def get_published_by_id(self, db: AsyncSession, *, id) -> Optional[about_models.AboutSection]:
        sections = await self.get_filtered(db, filters={"id": id, "published": True}, limit=1)
        return sections[0] if sections else None

    async def get_all(self, db: AsyncSession) -> List[about_models.AboutSection]:
        return await self.get_filtered(
            db, order_by=[self.model.sort_order, self.model.created_at], limit=None
        )


about_section = CRUDAboutSection()
about_section_image = CRUDBase(about_models.AboutSectionImage)


class AboutSectionRepository(SQLContentRepository):
    # 고유 키 없음: 같은 제목의 섹션도 허용합니다.
    parent_crud = about_section
    asset_crud = about_section_image
    parent_label = "AboutSection"
    asset_label = "AboutSectionImage"
