# app/domains/media/tasks.py

"""
어떤 자산 행도 참조하지 않는 파일(orphan)을 정리하는 스윕 로직입니다.

부모 레코드 삭제 도중 중단되거나 보상 삭제가 실패하면 파일만 남을 수 있으며,
이 스윕이 유예 시간(grace)이 지난 파일을 회수합니다.
유예 시간 안의 파일은 아직 진행 중인 생성 요청의 것일 수 있으므로 건드리지 않습니다.
"""

import logging
from datetime import datetime, timedelta, UTC
from typing import List, Optional, Type

from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.media.storage import AssetStore

logger = logging.getLogger(__name__)


async def sweep_orphaned_files(
    db: AsyncSession,
    store: AssetStore,
    namespace: str,
    asset_model: Type[SQLModel],
    grace: timedelta,
    now: Optional[datetime] = None,
) -> List[str]:
    """
    네임스페이스에서 참조되지 않고 grace보다 오래된 파일을 삭제합니다.

    Returns:
        삭제된 파일명 목록
    """
    now = now or datetime.now(UTC)
    on_disk = await store.list_namespace(namespace)
    if not on_disk:
        return []

    result = await db.execute(select(asset_model.filename))
    referenced = set(result.scalars().all())

    orphans = [
        name for name, modified_at in on_disk.items()
        if name not in referenced and now - modified_at >= grace
    ]
    if not orphans:
        logger.debug("No orphaned files in '%s'", namespace)
        return []

    failed = await store.delete_many(orphans, namespace)
    removed = [name for name in orphans if name not in failed]
    logger.info("Swept %d orphaned file(s) from '%s'", len(removed), namespace)
    return removed
