# app/domains/pages/services.py

from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.media.schemas import MediaBundle
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from . import crud, schemas

NAMESPACE = "page-content"


def build_coordinator(db: AsyncSession, store: AssetStore) -> MediaCreationCoordinator:
    return MediaCreationCoordinator(crud.PageSectionRepository(db), store, NAMESPACE)


def to_section_read(bundle: MediaBundle) -> schemas.PageSectionRead:
    return schemas.PageSectionRead.model_validate(
        {
            **bundle.record.model_dump(),
            "images": [schemas.PageSectionImageRead.model_validate(a) for a in bundle.assets],
        }
    )
