# app/domains/blog/services.py

"""
'blog' 도메인의 서비스 계층입니다.

- generate_slug: 제목으로부터 URL용 슬러그 생성
- prepare_article_fields / apply_publication: 슬러그 기본값과 최초 공개 일시 처리
- build_coordinator: 블로그용 MediaCreationCoordinator 구성 (이미지 0장 허용)
"""

import re
import unicodedata
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.media.schemas import MediaBundle
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore
from . import crud, models, schemas

NAMESPACE = "blog"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """
    제목을 슬러그로 변환합니다.
    소문자 변환 후 악센트를 제거하고, 영숫자가 아닌 문자 묶음은 '-' 하나로 바꾼 뒤 양끝 '-'를 제거합니다.

    >>> generate_slug("Crème Brûlée: A Story!")
    'creme-brulee-a-story'
    """
    normalized = unicodedata.normalize("NFD", (title or "").lower())
    stripped = "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")
    return _NON_ALNUM.sub("-", stripped).strip("-")


def prepare_article_fields(article_in: schemas.BlogArticleCreate) -> Dict[str, Any]:
    fields = article_in.model_dump()
    fields["slug"] = generate_slug(fields.get("slug") or fields["title"])
    if fields.get("published"):
        fields["published_at"] = datetime.now(UTC)
    return fields


def apply_publication(record: models.BlogArticle, fields: Dict[str, Any]) -> Dict[str, Any]:
    """처음 공개되는 시점에만 published_at을 기록합니다. 슬러그 변경 시 정규화합니다."""
    fields = dict(fields)
    if fields.get("slug"):
        fields["slug"] = generate_slug(fields["slug"])
    if fields.get("published") and record.published_at is None:
        fields["published_at"] = datetime.now(UTC)
    return fields


def build_coordinator(db: AsyncSession, store: AssetStore) -> MediaCreationCoordinator:
    return MediaCreationCoordinator(crud.BlogArticleRepository(db), store, NAMESPACE)


def to_article_read(bundle: MediaBundle) -> schemas.BlogArticleRead:
    images = [schemas.BlogArticleImageRead.model_validate(a) for a in bundle.assets]
    cover: Optional[schemas.BlogArticleImageRead] = next((i for i in images if i.is_primary), None)
    return schemas.BlogArticleRead.model_validate(
        {**bundle.record.model_dump(), "images": images, "cover_image": cover}
    )
