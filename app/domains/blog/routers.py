# app/domains/blog/routers.py

"""
'blog' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

글 생성(본문 이미지 업로드 포함), 공개 목록/전체 목록/슬러그 조회, 수정, 삭제와
글 이미지의 추가, 메타데이터 수정, 커버 이미지 지정, 삭제 엔드포인트를 제공합니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_asset_store, get_base_url, get_db_session
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from app.utils.files import build_form_model, to_asset_inputs, validate_image_uploads

from app.domains.blog import crud as blog_crud
from app.domains.blog import schemas as blog_schemas
from app.domains.blog import services as blog_services


router = APIRouter(
    tags=["Blog (블로그 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_coordinator(
    db: AsyncSession = Depends(get_db_session),
    store: AssetStore = Depends(get_asset_store),
) -> MediaCreationCoordinator:
    return blog_services.build_coordinator(db, store)


#  =============================================================================
#  1. 블로그 글 (BlogArticle) 엔드포인트
#  =============================================================================
@router.post("", response_model=blog_schemas.BlogArticleRead, status_code=status.HTTP_201_CREATED, summary="새 블로그 글 생성 (이미지 포함)")
async def create_article(
    title: str = Form(...),
    subtitle: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
    published: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
    alt_texts: Optional[List[str]] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """
    글과 이미지(0~MAX_BLOG_IMAGES장)를 함께 생성합니다.
    - slug를 생략하면 제목으로부터 생성됩니다. slug는 고유해야 합니다 (409).
    - 첫 번째 이미지가 커버 이미지가 됩니다.
    """
    files = validate_image_uploads(images, max_files=settings.MAX_BLOG_IMAGES)
    article_in = build_form_model(
        blog_schemas.BlogArticleCreate,
        title=title, subtitle=subtitle, content=content, slug=slug,
        published=published, sort_order=sort_order,
    )
    fields = blog_services.prepare_article_fields(article_in)
    inputs = to_asset_inputs(files, alt_texts=alt_texts)
    bundle = await coordinator.create_with_assets(fields, inputs, base_url=base_url)
    return blog_services.to_article_read(bundle)


@router.get("", response_model=List[blog_schemas.BlogArticleRead], summary="전체 블로그 글 목록 (관리용)")
async def read_articles(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    articles = await blog_crud.blog_article.get_all(db, skip=skip, limit=limit)
    return [blog_services.to_article_read(await coordinator.get_bundle(a.id)) for a in articles]


@router.get("/published", response_model=List[blog_schemas.BlogArticleRead], summary="공개된 블로그 글 목록")
async def read_published_articles(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    articles = await blog_crud.blog_article.get_published(db, skip=skip, limit=limit)
    return [blog_services.to_article_read(await coordinator.get_bundle(a.id)) for a in articles]


@router.get("/slug/{slug}", response_model=blog_schemas.BlogArticleRead, summary="슬러그로 공개 글 조회")
async def read_article_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    article = await blog_crud.blog_article.get_by_slug(db, slug=slug, published_only=True)
    if article is None:
        raise HTTPException(status_code=404, detail=f'Article with slug "{slug}" not found')
    return blog_services.to_article_read(await coordinator.get_bundle(article.id))


@router.get("/{article_id}", response_model=blog_schemas.BlogArticleRead, summary="특정 블로그 글 조회")
async def read_article(
    article_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return blog_services.to_article_read(await coordinator.get_bundle(article_id))


@router.patch("/{article_id}", response_model=blog_schemas.BlogArticleRead, summary="블로그 글 수정")
async def update_article(
    article_id: uuid.UUID,
    article_update: blog_schemas.BlogArticleUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    current = await coordinator.get_bundle(article_id)
    fields = blog_services.apply_publication(current.record, article_update.model_dump(exclude_unset=True))
    bundle = await coordinator.update_record(article_id, fields)
    return blog_services.to_article_read(bundle)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT, summary="블로그 글 삭제 (이미지 포함)")
async def delete_article(
    article_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_content_record(article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


#  =============================================================================
#  2. 블로그 글 이미지 (BlogArticleImage) 엔드포인트
#  =============================================================================
@router.post("/{article_id}/images", response_model=List[blog_schemas.BlogArticleImageRead], status_code=status.HTTP_201_CREATED, summary="블로그 글 이미지 추가")
async def add_article_images(
    article_id: uuid.UUID,
    images: List[UploadFile] = File(...),
    alt_texts: Optional[List[str]] = Form(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    files = validate_image_uploads(images, max_files=settings.MAX_BLOG_IMAGES, min_files=1)
    inputs = to_asset_inputs(files, alt_texts=alt_texts)
    return await coordinator.append_assets(article_id, inputs, base_url=base_url)


@router.patch("/{article_id}/images/{image_id}", response_model=blog_schemas.BlogArticleImageRead, summary="블로그 글 이미지 정보 수정")
async def update_article_image(
    article_id: uuid.UUID,
    image_id: uuid.UUID,
    image_update: blog_schemas.BlogArticleImageUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return await coordinator.update_asset_metadata(image_id, image_update, parent_id=article_id)


@router.put("/{article_id}/images/{image_id}/cover", response_model=blog_schemas.BlogArticleImageRead, summary="커버 이미지 지정")
async def set_article_cover_image(
    article_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return await coordinator.set_primary_asset(image_id, parent_id=article_id)


@router.delete("/{article_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT, summary="블로그 글 이미지 삭제")
async def delete_article_image(
    article_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_asset(image_id, parent_id=article_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
