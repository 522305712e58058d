# app/domains/products/routers.py

"""
'products' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

작품 생성(이미지 multipart 업로드 포함), 조회, 수정, 삭제와
작품 이미지의 추가, 메타데이터 수정, 대표 이미지 지정, 삭제 엔드포인트를 제공합니다.
라우터는 HTTP 요청을 MediaCreationCoordinator 호출로 변환하는 역할만 합니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_asset_store, get_base_url, get_db_session
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from app.utils.files import build_form_model, parse_json_field, to_asset_inputs, validate_image_uploads

from app.domains.products import crud as product_crud
from app.domains.products import models as product_models
from app.domains.products import schemas as product_schemas
from app.domains.products import services as product_services


router = APIRouter(
    tags=["Products (작품 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_coordinator(
    db: AsyncSession = Depends(get_db_session),
    store: AssetStore = Depends(get_asset_store),
) -> MediaCreationCoordinator:
    return product_services.build_coordinator(db, store)


#  =============================================================================
#  1. 작품 (Product) 엔드포인트
#  =============================================================================
@router.post("", response_model=product_schemas.ProductRead, status_code=status.HTTP_201_CREATED, summary="새 작품 생성 (이미지 포함)")
async def create_product(
    name: str = Form(...),
    category: str = Form(...),
    price: str = Form(...),
    description: Optional[str] = Form(None),
    product_status: Optional[str] = Form(None, alias="status"),
    stock_quantity: Optional[int] = Form(None),
    dimensions: Optional[str] = Form(None, description="JSON 문자열"),
    materials: Optional[str] = Form(None),
    sort_order: Optional[int] = Form(None),
    published: Optional[bool] = Form(None),
    alt_texts: Optional[List[str]] = Form(None),
    show_on_home: Optional[List[bool]] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """
    작품과 이미지(1~MAX_PRODUCT_IMAGES장)를 함께 생성합니다.
    첫 번째 이미지가 대표 이미지가 되며, 이미지 순서는 업로드 순서를 따릅니다.
    - (`name`, `category`) 조합은 고유해야 합니다 (409).
    """
    files = validate_image_uploads(images, max_files=settings.MAX_PRODUCT_IMAGES, min_files=1)
    product_in = build_form_model(
        product_schemas.ProductCreate,
        name=name,
        category=category,
        price=price,
        description=description,
        status=product_status,
        stock_quantity=stock_quantity,
        dimensions=parse_json_field(dimensions, "dimensions"),
        materials=materials,
        sort_order=sort_order,
        published=published,
    )
    inputs = to_asset_inputs(
        files,
        alt_texts=alt_texts,
        attributes=[{"show_on_home": flag} for flag in (show_on_home or [])],
    )
    bundle = await coordinator.create_with_assets(product_in.model_dump(), inputs, base_url=base_url)
    return product_services.to_product_read(bundle)


@router.get("", response_model=product_schemas.ProductListResponse, summary="작품 목록 조회 (필터/페이징)")
async def read_products(
    category: Optional[product_models.ProductCategory] = None,
    product_status: Optional[product_models.ProductStatus] = Query(None, alias="status"),
    published: Optional[bool] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    products, total = await product_crud.product.get_multi_filtered(
        db, category=category, status=product_status, published=published,
        search=search, skip=skip, limit=limit,
    )
    items = [
        product_services.to_product_read(await coordinator.get_bundle(p.id)) for p in products
    ]
    return product_schemas.ProductListResponse(items=items, total=total, skip=skip, limit=limit)


@router.get("/statistics", response_model=product_schemas.ProductStatistics, summary="카테고리/상태별 작품 통계")
async def read_product_statistics(db: AsyncSession = Depends(get_db_session)):
    return await product_crud.product.get_statistics(db)


@router.get("/home-grid", response_model=List[product_schemas.HomeGridItem], summary="홈 화면 그리드 이미지 목록")
async def read_home_grid(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
):
    """공개된 작품의 이미지 중 show_on_home이 설정된 이미지를 반환합니다."""
    rows = await product_crud.product_image.get_home_grid(db, limit=limit)
    return [
        product_schemas.HomeGridItem(
            image_id=image.id,
            product_id=parent.id,
            product_name=parent.name,
            category=parent.category,
            url=image.url,
            alt_text=image.alt_text,
            position=image.position,
        )
        for image, parent in rows
    ]


@router.get("/category/{category}", response_model=List[product_schemas.ProductRead], summary="카테고리별 판매 중 작품 조회")
async def read_products_by_category(
    category: product_models.ProductCategory,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    products = await product_crud.product.get_by_category(db, category=category)
    return [product_services.to_product_read(await coordinator.get_bundle(p.id)) for p in products]


@router.get("/{product_id}", response_model=product_schemas.ProductRead, summary="특정 작품 조회")
async def read_product(
    product_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return product_services.to_product_read(await coordinator.get_bundle(product_id))


@router.patch("/{product_id}", response_model=product_schemas.ProductRead, summary="작품 정보 수정")
async def update_product(
    product_id: uuid.UUID,
    product_update: product_schemas.ProductUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    bundle = await coordinator.update_record(product_id, product_update.model_dump(exclude_unset=True))
    return product_services.to_product_read(bundle)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="작품 삭제 (이미지 포함)")
async def delete_product(
    product_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    """작품의 모든 이미지 파일 삭제를 시도한 뒤, 이미지 레코드와 작품 레코드를 삭제합니다."""
    await coordinator.remove_content_record(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


#  =============================================================================
#  2. 작품 이미지 (ProductImage) 엔드포인트
#  =============================================================================
@router.post("/{product_id}/images", response_model=List[product_schemas.ProductImageRead], status_code=status.HTTP_201_CREATED, summary="작품 이미지 추가")
async def add_product_images(
    product_id: uuid.UUID,
    images: List[UploadFile] = File(...),
    alt_texts: Optional[List[str]] = Form(None),
    show_on_home: Optional[List[bool]] = Form(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """기존 이미지 뒤에 이어 붙입니다. 추가된 이미지는 대표 이미지가 되지 않습니다."""
    files = validate_image_uploads(images, max_files=settings.MAX_PRODUCT_IMAGES, min_files=1)
    inputs = to_asset_inputs(
        files,
        alt_texts=alt_texts,
        attributes=[{"show_on_home": flag} for flag in (show_on_home or [])],
    )
    return await coordinator.append_assets(product_id, inputs, base_url=base_url)


@router.patch("/{product_id}/images/{image_id}", response_model=product_schemas.ProductImageRead, summary="작품 이미지 정보 수정")
async def update_product_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    image_update: product_schemas.ProductImageUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    """대체 텍스트, 대표 여부, 순서, 홈 노출 여부만 수정합니다. 파일은 변경하지 않습니다."""
    return await coordinator.update_asset_metadata(image_id, image_update, parent_id=product_id)


@router.put("/{product_id}/images/{image_id}/primary", response_model=product_schemas.ProductImageRead, summary="대표 이미지 지정")
async def set_product_primary_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return await coordinator.set_primary_asset(image_id, parent_id=product_id)


@router.delete("/{product_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT, summary="작품 이미지 삭제")
async def delete_product_image(
    product_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_asset(image_id, parent_id=product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
