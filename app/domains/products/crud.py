# app/domains/products/crud.py

"""
'products' 도메인의 CRUD 로직과 ContentRepository 구현을 담당하는 모듈입니다.
"""

from typing import List, Optional, Tuple, Dict

from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.domains.media.repository import SQLContentRepository
from app.domains.media.schemas import MediaAssetUpdate
from . import models as product_models
from . import schemas as product_schemas


# =============================================================================
# 1. 작품 (Product) CRUD
# =============================================================================
class CRUDProduct(
    CRUDBase[
        product_models.Product,
        product_schemas.ProductCreate,
        product_schemas.ProductUpdate
    ]
):
    def __init__(self):
        super().__init__(model=product_models.Product)

    async def get_multi_filtered(
        self,
        db: AsyncSession,
        *,
        category: Optional[product_models.ProductCategory] = None,
        status: Optional[product_models.ProductStatus] = None,
        published: Optional[bool] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[product_models.Product], int]:
        """
        카테고리/상태/공개 여부/검색어로 필터링한 작품 목록과 전체 건수를 반환합니다.
        정렬은 sort_order 오름차순, 생성일 내림차순입니다.
        """
        conditions = []
        if category is not None:
            conditions.append(self.model.category == category)
        if status is not None:
            conditions.append(self.model.status == status)
        if published is not None:
            conditions.append(self.model.published == published)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(self.model.name.ilike(pattern), self.model.description.ilike(pattern)))

        count_query = select(func.count()).select_from(self.model)
        query = select(self.model)
        if conditions:
            count_query = count_query.where(*conditions)
            query = query.where(*conditions)

        total = (await db.execute(count_query)).scalar_one()
        query = query.order_by(self.model.sort_order, self.model.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), int(total)

    async def get_by_category(
        self, db: AsyncSession, *, category: product_models.ProductCategory
    ) -> List[product_models.Product]:
        """공개된 판매 가능 작품만 카테고리별로 조회합니다."""
        return await self.get_filtered(
            db,
            filters={
                "category": category,
                "status": product_models.ProductStatus.AVAILABLE,
                "published": True,
            },
            order_by=[self.model.sort_order, self.model.created_at.desc()],
            limit=None,
        )

    async def get_statistics(self, db: AsyncSession) -> Dict[str, object]:
        total = await self.count(db)
        published = await self.count(db, filters={"published": True})

        by_category: Dict[str, int] = {c.value: 0 for c in product_models.ProductCategory}
        result = await db.execute(
            select(self.model.category, func.count()).group_by(self.model.category)
        )
        for category, count in result.all():
            by_category[getattr(category, "value", category)] = count

        by_status: Dict[str, int] = {s.value: 0 for s in product_models.ProductStatus}
        result = await db.execute(
            select(self.model.status, func.count()).group_by(self.model.status)
        )
        for status, count in result.all():
            by_status[getattr(status, "value", status)] = count

        return {
            "total": total,
            "published": published,
            "by_category": by_category,
            "by_status": by_status,
        }


product = CRUDProduct()


# =============================================================================
# 2. 작품 이미지 (ProductImage) CRUD
# =============================================================================
class CRUDProductImage(
    CRUDBase[
        product_models.ProductImage,
        product_schemas.ProductImageRead,
        MediaAssetUpdate
    ]
):
    def __init__(self):
        super().__init__(model=product_models.ProductImage)

    async def get_home_grid(
        self, db: AsyncSession, *, limit: Optional[int] = None
    ) -> List[Tuple[product_models.ProductImage, product_models.Product]]:
        """
        홈 화면 그리드용 이미지 목록을 조회합니다.
        show_on_home이 설정되고, 부모 작품이 공개 상태인 이미지만 포함합니다.
        """
        Product = product_models.Product
        statement = (
            select(self.model, Product)
            .join(Product, Product.id == self.model.parent_id)
            .where(self.model.show_on_home == True)  # noqa: E712
            .where(Product.published == True)  # noqa: E712
            .order_by(Product.sort_order, self.model.position)
        )
        if limit is not None:
            statement = statement.limit(limit)
        result = await db.execute(statement)
        return [(image, parent) for image, parent in result.all()]


product_image = CRUDProductImage()


# =============================================================================
# 3. ContentRepository 구현
# =============================================================================
class ProductRepository(SQLContentRepository):
    parent_crud = product
    asset_crud = product_image
    unique_fields = ("name", "category")
    parent_label = "Product"
    asset_label = "ProductImage"
