# app/core/tasks.py

"""
ARQ 워커가 실행하는 주기 작업을 정의하는 모듈입니다.

- health_check_database_task: 데이터베이스 연결 상태 확인
- cleanup_orphaned_files_task: 네임스페이스별로 어떤 이미지 행도 참조하지 않는 파일 정리
"""

import logging
from datetime import timedelta

from sqlmodel import select

from app.core.config import settings
from app.core.database import get_async_session_context
from app.domains.media.storage import AssetStore
from app.domains.media.tasks import sweep_orphaned_files
from app.domains.about.models import AboutSectionImage
from app.domains.about.services import NAMESPACE as ABOUT_NAMESPACE
from app.domains.blog.models import BlogArticleImage
from app.domains.blog.services import NAMESPACE as BLOG_NAMESPACE
from app.domains.pages.models import PageSectionImage
from app.domains.pages.services import NAMESPACE as PAGES_NAMESPACE
from app.domains.products.models import ProductImage
from app.domains.products.services import NAMESPACE as PRODUCTS_NAMESPACE

logger = logging.getLogger(__name__)

# 네임스페이스 -> 해당 네임스페이스의 파일을 참조하는 자산 테이블
ASSET_NAMESPACES = {
    PRODUCTS_NAMESPACE: ProductImage,
    BLOG_NAMESPACE: BlogArticleImage,
    PAGES_NAMESPACE: PageSectionImage,
    ABOUT_NAMESPACE: AboutSectionImage,
}


async def health_check_database_task(ctx):
    """
    ARQ 워커에 의해 실행될 주기적인 데이터베이스 헬스 체크 태스크.
    """
    try:
        async with get_async_session_context() as db:
            result = await db.execute(select(1))
            if result.scalar_one_or_none() == 1:
                logger.info("Database health check succeeded")
                return {"status": "success", "message": "Database connection successful."}
            logger.error("Database health check failed: no result from test query")
            return {"status": "failed", "message": "No result from test query."}
    except Exception as e:
        logger.exception("Database health check failed")
        return {"status": "failed", "message": f"Database connection error: {e}"}


async def cleanup_orphaned_files_task(ctx):
    """
    ARQ 워커에 의해 실행될 고아 파일 정리 태스크.
    ORPHAN_GRACE_MINUTES보다 오래되었고 어떤 이미지 행도 참조하지 않는 파일을 삭제합니다.
    """
    store = AssetStore(settings.UPLOAD_DIR, settings.STORAGE_ROOT)
    grace = timedelta(minutes=settings.ORPHAN_GRACE_MINUTES)
    removed = {}

    async with get_async_session_context() as db:
        for namespace, asset_model in ASSET_NAMESPACES.items():
            removed[namespace] = await sweep_orphaned_files(db, store, namespace, asset_model, grace)

    total = sum(len(files) for files in removed.values())
    logger.info("Orphaned file cleanup finished: %d file(s) removed", total)
    return {"status": "success", "deleted_count": total, "deleted": removed}
