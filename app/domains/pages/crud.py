# app/domains/pages/crud.py

"""
'pages' 도메인의 CRUD 로직과 ContentRepository 구현을 담당하는 모듈입니다.
"""

from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.media.repository import SQLContentRepository
from . import models as page_models
from . import schemas as page_schemas


class CRUDPageSection(
    CRUDBase[
        page_models.PageSection,
        page_schemas.PageSectionCreate,
        page_schemas.PageSectionUpdate
    ]
):
    def __init__(self):
        super().__init__(model=page_models.PageSection)

    async def get_published_by_page(self, db: AsyncSession, *, page: str) -> List[page_models.PageSection]:
        return await self.get_filtered(
            db,
            filters={"page": page, "published": True},
            order_by=[self.model.sort_order, self.model.created_at],
            limit=None,
        )

    async def get_published_section(
        self, db: AsyncSession, *, page: str, section: str
    ) -> Optional[page_models.PageSection]:
        sections = await self.get_filtered(
            db, filters={"page": page, "section": section, "published": True}, limit=1
        )
        return sections[0] if sections else None

    async def get_all(
        self, db: AsyncSession, *, page: Optional[str] = None
    ) -> List[page_models.PageSection]:
        """관리용 전체 목록. 페이지, sort_order 순으로 정렬합니다."""
        return await self.get_filtered(
            db,
            filters={"page": page} if page else None,
            order_by=[self.model.page, self.model.sort_order, self.model.section],
            limit=None,
        )


page_section = CRUDPageSection()
page_section_image = CRUDBase(page_models.PageSectionImage)


class PageSectionRepository(SQLContentRepository):
    parent_crud = page_section
    asset_crud = page_section_image
    unique_fields = ("page", "section")
    parent_label = "PageSection"
    asset_label = "PageSectionImage"
