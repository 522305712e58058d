# app/domains/products/models.py

"""
'products' 도메인 (작품 카탈로그)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- Product: 벽걸이(wall-hanging), 러그(rug) 작품 한 점
- ProductImage: 작품에 연결된 이미지 (position 순서, 대표 이미지, 홈 그리드 노출 여부)
"""

import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any

from sqlalchemy import JSON, String, Text, UniqueConstraint
from sqlmodel import Field

from app.domains.media.models import ContentRecordBase, MediaAssetBase, TimestampMixin


class ProductCategory(str, Enum):
    """작품 카테고리"""
    WALL_HANGING = "wall-hanging"
    RUG = "rug"


class ProductStatus(str, Enum):
    """판매 상태"""
    AVAILABLE = "available"
    SOLD = "sold"
    DRAFT = "draft"


# =============================================================================
# 1. products 테이블 모델
# =============================================================================
class ProductBase(ContentRecordBase):
    name: str = Field(max_length=255, index=True, description="작품명")
    description: Optional[str] = Field(default=None, sa_type=Text, description="작품 설명")
    category: ProductCategory = Field(sa_type=String(20), index=True, description="카테고리")
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2, ge=0, description="가격")
    status: ProductStatus = Field(default=ProductStatus.DRAFT, sa_type=String(20), index=True)
    stock_quantity: int = Field(default=1, ge=0, description="재고 수량")
    dimensions: Optional[Dict[str, Any]] = Field(
        default=None, sa_type=JSON, description="크기 정보 (예: {'width': 120, 'height': 80, 'unit': 'cm'})"
    )
    materials: Optional[str] = Field(default=None, max_length=500, description="사용 재료")


class Product(ProductBase, TimestampMixin, table=True):
    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("name", "category", name="uq_products_name_category"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


# =============================================================================
# 2. product_images 테이블 모델
# =============================================================================
class ProductImage(MediaAssetBase, table=True):
    __tablename__ = "product_images"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    parent_id: uuid.UUID = Field(foreign_key="products.id", ondelete="CASCADE", index=True, description="작품 ID")
    show_on_home: bool = Field(default=False, index=True, description="홈 화면 그리드 노출 여부")
