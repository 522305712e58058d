# app/domains/blog/crud.py

"""
'blog' 도메인의 CRUD 로직과 ContentRepository 구현을 담당하는 모듈입니다.
"""

from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.media.repository import SQLContentRepository
from . import models as blog_models
from . import schemas as blog_schemas


class CRUDBlogArticle(
    CRUDBase[
        blog_models.BlogArticle,
        blog_schemas.BlogArticleCreate,
        blog_schemas.BlogArticleUpdate
    ]
):
    def __init__(self):
        super().__init__(model=blog_models.BlogArticle)

    async def get_by_slug(
        self, db: AsyncSession, *, slug: str, published_only: bool = False
    ) -> Optional[blog_models.BlogArticle]:
        filters = {"slug": slug}
        if published_only:
            filters["published"] = True
        articles = await self.get_filtered(db, filters=filters, limit=1)
        return articles[0] if articles else None

    async def get_published(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 20
    ) -> List[blog_models.BlogArticle]:
        """공개된 글을 최신순(공개 일시, 생성 일시 내림차순)으로 조회합니다."""
        return await self.get_filtered(
            db,
            filters={"published": True},
            order_by=[self.model.published_at.desc(), self.model.created_at.desc()],
            skip=skip,
            limit=limit,
        )

    async def get_all(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100
    ) -> List[blog_models.BlogArticle]:
        """관리용 전체 목록. sort_order 오름차순, 생성 일시 내림차순입니다."""
        return await self.get_filtered(
            db,
            order_by=[self.model.sort_order, self.model.created_at.desc()],
            skip=skip,
            limit=limit,
        )


blog_article = CRUDBlogArticle()
blog_article_image = CRUDBase(blog_models.BlogArticleImage)


class BlogArticleRepository(SQLContentRepository):
    parent_crud = blog_article
    asset_crud = blog_article_image
    unique_fields = ("slug",)
    parent_label = "BlogArticle"
    asset_label = "BlogArticleImage"
