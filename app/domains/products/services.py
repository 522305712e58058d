# app/domains/products/services.py

"""
'products' 도메인의 서비스 계층입니다.
작품 전용 설정(최소 이미지 1장, show_on_home 플래그)으로 MediaCreationCoordinator를 구성합니다.
"""

from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.media.schemas import MediaBundle
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from . import crud, schemas

NAMESPACE = "products"


def build_coordinator(db: AsyncSession, store: AssetStore) -> MediaCreationCoordinator:
    return MediaCreationCoordinator(
        crud.ProductRepository(db),
        store,
        NAMESPACE,
        min_assets=1,
        asset_fields=("show_on_home",),
    )


def to_product_read(bundle: MediaBundle) -> schemas.ProductRead:
    return schemas.ProductRead.model_validate(
        {
            **bundle.record.model_dump(),
            "images": [schemas.ProductImageRead.model_validate(a) for a in bundle.assets],
        }
    )
