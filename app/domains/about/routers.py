# app/domains/about/routers.py

"""
'about' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

소개 섹션 생성(이미지 한 장 필수), 공개 목록/단건 조회, 관리용 전체 목록,
텍스트 수정, 이미지 교체, 삭제 엔드포인트를 제공합니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.dependencies import get_asset_store, get_base_url, get_db_session
from app.core.exceptions import NotFoundError
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from app.utils.files import build_form_model, parse_json_field, to_asset_inputs, validate_image_uploads

from app.domains.about import crud as about_crud
from app.domains.about import schemas as about_schemas
from app.domains.about import services as about_services


router = APIRouter(
    tags=["About Sections (소개 섹션 관리)"],
    responses={404: {"description": "Not found"}},
)


def get_coordinator(
    db: AsyncSession = Depends(get_db_session),
    store: AssetStore = Depends(get_asset_store),
) -> MediaCreationCoordinator:
    return about_services.build_coordinator(db, store)


def _single_image(image: Optional[UploadFile]) -> List[UploadFile]:
    return validate_image_uploads([image] if image is not None else [], max_files=1, min_files=1)


#  =============================================================================
#  1. 소개 섹션 (AboutSection) 엔드포인트
#  =============================================================================
@router.post("", response_model=about_schemas.AboutSectionRead, status_code=status.HTTP_201_CREATED, summary="새 소개 섹션 생성 (이미지 필수)")
async def create_section(
    title: str = Form(...),
    paragraphs: str = Form(..., description='JSON 문자열 배열 (예: ["첫 문단", "둘째 문단"])'),
    image_alt: str = Form(..., max_length=255),
    published: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """
    이미지 한 장(`image`)이 반드시 필요합니다 (400).
    `image_alt`는 이미지의 대체 텍스트로 저장됩니다.
    """
    files = _single_image(image)
    section_in = build_form_model(
        about_schemas.AboutSectionCreate,
        title=title, paragraphs=parse_json_field(paragraphs, "paragraphs"),
        published=published, sort_order=sort_order,
    )
    inputs = to_asset_inputs(files, alt_texts=[image_alt])
    bundle = await coordinator.create_with_assets(section_in.model_dump(), inputs, base_url=base_url)
    return about_services.to_section_read(bundle)


@router.get("", response_model=List[about_schemas.AboutSectionRead], summary="공개 소개 섹션 목록 (sort_order 순)")
async def read_published_sections(
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    sections = await about_crud.about_section.get_published(db)
    return [about_services.to_section_read(await coordinator.get_bundle(s.id)) for s in sections]


@router.get("/all", response_model=List[about_schemas.AboutSectionRead], summary="전체 소개 섹션 목록 (관리용)")
async def read_all_sections(
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    sections = await about_crud.about_section.get_all(db)
    return [about_services.to_section_read(await coordinator.get_bundle(s.id)) for s in sections]


@router.get("/{section_id}", response_model=about_schemas.AboutSectionRead, summary="공개 소개 섹션 조회")
async def read_section(
    section_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    db_section = await about_crud.about_section.get_published_by_id(db, id=section_id)
    if db_section is None:
        raise NotFoundError("AboutSection", section_id)
    return about_services.to_section_read(await coordinator.get_bundle(db_section.id))


@router.patch("/{section_id}", response_model=about_schemas.AboutSectionRead, summary="소개 섹션 텍스트 수정")
async def update_section(
    section_id: uuid.UUID,
    section_update: about_schemas.AboutSectionUpdate,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    bundle = await coordinator.update_record(section_id, section_update.model_dump(exclude_unset=True))
    return about_services.to_section_read(bundle)


@router.patch("/{section_id}/image", response_model=about_schemas.AboutSectionRead, summary="소개 섹션 이미지 교체")
async def replace_section_image(
    section_id: uuid.UUID,
    image: Optional[UploadFile] = File(None),
    image_alt: Optional[str] = Form(None, max_length=255),
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
    base_url: str = Depends(get_base_url),
):
    """새 파일을 저장하고 이미지 행을 갱신한 뒤 이전 파일을 삭제합니다."""
    files = _single_image(image)
    item = to_asset_inputs(files, alt_texts=[image_alt])[0]
    bundle = await about_services.replace_section_image(coordinator, section_id, item, base_url=base_url)
    return about_services.to_section_read(bundle)


@router.delete("/{section_id}", status_code=status.HTTP_204_NO_CONTENT, summary="소개 섹션 삭제 (이미지 파일 포함)")
async def delete_section(
    section_id: uuid.UUID,
    coordinator: MediaCreationCoordinator = Depends(get_coordinator),
):
    await coordinator.remove_content_record(section_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
