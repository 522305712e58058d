# app/domains/products/schemas.py

"""
'products' 도메인의 API 요청/응답 스키마를 정의하는 모듈입니다.
"""

import uuid
from decimal import Decimal
from datetime import datetime
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel
from pydantic import Field

from app.domains.media.schemas import MediaAssetRead, MediaAssetUpdate
from .models import ProductBase, ProductCategory, ProductStatus


# =============================================================================
# 1. 작품 (Product) 스키마
# =============================================================================
class ProductCreate(ProductBase):
    """
    새 작품 생성용 모델입니다. `name`, `category`는 필수이며 이미지는 multipart로 함께 전송됩니다.
    """
    pass


class ProductUpdate(SQLModel):
    """
    작품 정보 수정용 모델입니다. 모든 필드는 선택 사항입니다 (부분 업데이트 가능).
    """
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: Optional[ProductStatus] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    dimensions: Optional[Dict[str, Any]] = None
    materials: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    published: Optional[bool] = None


# =============================================================================
# 2. 작품 이미지 (ProductImage) 스키마
# =============================================================================
class ProductImageRead(MediaAssetRead):
    show_on_home: bool = False


class ProductImageUpdate(MediaAssetUpdate):
    show_on_home: Optional[bool] = None


class ProductRead(ProductBase):
    """
    작품 정보를 응답하기 위한 모델입니다. 이미지는 position 오름차순으로 포함됩니다.
    """
    id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    images: List[ProductImageRead] = []


class ProductListResponse(SQLModel):
    items: List[ProductRead]
    total: int
    skip: int
    limit: int


class ProductStatistics(SQLModel):
    total: int
    published: int
    by_category: Dict[str, int]
    by_status: Dict[str, int]


class HomeGridItem(SQLModel):
    """홈 화면 그리드에 노출되는 이미지 한 장과 해당 작품 정보"""
    image_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    category: ProductCategory
    url: str
    alt_text: Optional[str] = None
    position: int
