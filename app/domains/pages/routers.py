# app/domains/pages/routers.py

"""
'pages' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

페이지 섹션 생성(이미지 업로드 포함), 공개 섹션 조회, 수정, 삭제와
섹션 이미지의 추가, 메타데이터 수정, 대표 이미지 지정, 파일 교체, 삭제 엔드포인트를 제공합니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_asset_store, get_base_url, get_db_session
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from app.utils.files import build_form_model, parse_json_field, to_asset_inputs, validate_image_uploads

from app.domains.pages import crud as page_crud
from app.domains.pages import schemas as page_schemas
from app.domains.pages import services as page_services


router = APIRouter(
    tags=["Page Content (페이지 콘텐츠 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_coordinator(
    db: AsyncSession = Depends(get_db_session),
    store: AssetStore = Depends(get_asset_store),
) -> MediaCreationCoordinator:
    return page_services.build_coordinator(db, store)


#  =============================================================================
#  1. 페이지 섹션 (PageSection) 엔드포인트
#  =============================================================================
@router.post("", response_model=page_schemas.PageSectionRead, status_code=status.HTTP_201_CREATED, summary="새 페이지 섹션 생성 (이미지 포함)")
async def create_section(
    page: str = Form(...),
    section: str = Form(...),
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    meta: Optional[str] = Form(None, description="JSON 문자열"),
    published: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
    alt_texts: Optional[List[str]] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """
    (`page`, `section`) 조합은 고유해야 합니다 (409).
    """
    files = validate_image_uploads(images, max_files=settings.MAX_PAGE_IMAGES)
    section_in = build_form_model(
        page_schemas.PageSectionCreate,
        page=page, section=section, title=title, content=content,
        meta=parse_json_field(meta, "meta"), published=published, sort_order=sort_order,
    )
    inputs = to_asset_inputs(files, alt_texts=alt_texts)
    bundle = await coordinator.create_with_assets(section_in.model_dump(), inputs, base_url=base_url)
    return page_services.to_section_read(bundle)


@router.get("", response_model=List[page_schemas.PageSectionRead], summary="전체 페이지 섹션 목록 (관리용)")
async def read_sections(
    page: Optional[str] = None,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    sections = await page_crud.page_section.get_all(db, page=page)
    return [page_services.to_section_read(await coordinator.get_bundle(s.id)) for s in sections]


@router.get("/published/{page}", response_model=List[page_schemas.PageSectionRead], summary="페이지의 공개 섹션 목록")
async def read_published_sections(
    page: str,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    sections = await page_crud.page_section.get_published_by_page(db, page=page)
    return [page_services.to_section_read(await coordinator.get_bundle(s.id)) for s in sections]


@router.get("/published/{page}/{section}", response_model=page_schemas.PageSectionRead, summary="공개 섹션 단건 조회")
async def read_published_section(
    page: str,
    section: str,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    db_section = await page_crud.page_section.get_published_section(db, page=page, section=section)
    if db_section is None:
        raise HTTPException(status_code=404, detail=f'Section "{page}/{section}" not found')
    return page_services.to_section_read(await coordinator.get_bundle(db_section.id))


@router.get("/{section_id}", response_model=page_schemas.PageSectionRead, summary="특정 페이지 섹션 조회")
async def read_section(
    section_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return page_services.to_section_read(await coordinator.get_bundle(section_id))


@router.patch("/{section_id}", response_model=page_schemas.PageSectionRead, summary="페이지 섹션 수정")
async def update_section(
    section_id: uuid.UUID,
    section_update: page_schemas.PageSectionUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    bundle = await coordinator.update_record(section_id, section_update.model_dump(exclude_unset=True))
    return page_services.to_section_read(bundle)


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT, summary="페이지 섹션 삭제 (이미지 포함)")
async def delete_section(
    section_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_content_record(section_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


#  =============================================================================
#  2. 섹션 이미지 (PageSectionImage) 엔드포인트
#  =============================================================================
@router.post("/{section_id}/images", response_model=List[page_schemas.PageSectionImageRead], status_code=status.HTTP_201_CREATED, summary="섹션 이미지 추가")
async def add_section_images(
    section_id: uuid.UUID,
    images: List[UploadFile] = File(...),
    alt_texts: Optional[List[str]] = Form(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    files = validate_image_uploads(images, max_files=settings.MAX_PAGE_IMAGES, min_files=1)
    inputs = to_asset_inputs(files, alt_texts=alt_texts)
    return await coordinator.append_assets(section_id, inputs, base_url=base_url)


@router.put("/{section_id}/images/{image_id}", response_model=page_schemas.PageSectionImageRead, summary="섹션 이미지 파일 교체")
async def replace_section_image(
    section_id: uuid.UUID,
    image_id: uuid.UUID,
    image: UploadFile = File(...),
    alt_text: Optional[str] = Form(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """새 파일을 저장하고 이미지 레코드를 갱신한 뒤 이전 파일을 삭제합니다. 순서와 대표 여부는 유지됩니다."""
    files = validate_image_uploads([image], max_files=1, min_files=1)
    item = to_asset_inputs(files, alt_texts=[alt_text])[0]
    return await coordinator.replace_asset(image_id, item, base_url=base_url, parent_id=section_id)


@router.patch("/{section_id}/images/{image_id}", response_model=page_schemas.PageSectionImageRead, summary="섹션 이미지 정보 수정")
async def update_section_image(
    section_id: uuid.UUID,
    image_id: uuid.UUID,
    image_update: page_schemas.PageSectionImageUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return await coordinator.update_asset_metadata(image_id, image_update, parent_id=section_id)


@router.put("/{section_id}/images/{image_id}/primary", response_model=page_schemas.PageSectionImageRead, summary="대표 이미지 지정")
async def set_section_primary_image(
    section_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    return await coordinator.set_primary_asset(image_id, parent_id=section_id)


@router.delete("/{section_id}/images/{image_id}", status_code=status.HTTP_204_NO_CONTENT, summary="섹션 이미지 삭제")
async def delete_section_image(
    section_id: uuid.UUID,
    image_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_asset(image_id, parent_id=section_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
