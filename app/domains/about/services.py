# app/domains/about/services.py

"""
'about' 도메인의 서비스 계층입니다.
섹션마다 이미지가 정확히 한 장이므로 생성 시 최소 1장을 요구하고,
이미지 변경은 기존 자산의 파일 교체로 처리합니다.
"""

import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.media.schemas import AssetInput, MediaBundle
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from . import crud, schemas

NAMESPACE = "about-sections"


def build_coordinator(db: AsyncSession, store: AssetStore) -> MediaCreationCoordinator:
    return MediaCreationCoordinator(crud.AboutSectionRepository(db), store, NAMESPACE, min_assets=1)


def to_section_read(bundle: MediaBundle) -> schemas.AboutSectionRead:
    image = bundle.assets[0] if bundle.assets else None
    return schemas.AboutSectionRead.model_validate(
        {
            **bundle.record.model_dump(),
            "image": schemas.AboutSectionImageRead.model_validate(image) if image is not None else None,
        }
    )


async def replace_section_image(
    coordinator: MediaCreationCoordinator, section_id: uuid.UUID, item: AssetInput, *, base_url: str
) -> MediaBundle:
    """
    섹션 이미지를 새 파일로 교체합니다.
    이미지 행이 없는 섹션에는 새 이미지를 추가합니다.
    """
    bundle = await coordinator.get_bundle(section_id)
    if bundle.assets:
        await coordinator.replace_asset(bundle.assets[0].id, item, base_url=base_url, parent_id=section_id)
    else:
        await coordinator.append_assets(section_id, [item], base_url=base_url)
    return await coordinator.get_bundle(section_id)
