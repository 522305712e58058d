# app/domains/media/compensator.py

"""
후속 단계가 실패했을 때 이미 기록된 파일을 삭제하여 되돌리는 보상 처리 모듈입니다.
"""

import logging
from typing import Iterable, List, Optional

from app.domains.media.storage import AssetStore


class CleanupCompensator:
    """
    실패한 작업에서 남은 파일을 최선 노력으로 정리합니다. 예외를 발생시키지 않습니다.
    정리하지 못한 파일(leak)은 로그로 보고합니다.
    """

    def __init__(self, store: AssetStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    async def compensate(self, filenames: Iterable[str], namespace: str, reason: str) -> List[str]:
        filenames = list(filenames)
        if not filenames:
            return []

        self.logger.warning(
            "Compensating %d file(s) in '%s' after failure: %s", len(filenames), namespace, reason
        )
        try:
            leaked = await self.store.delete_many(filenames, namespace)
        except Exception as e:  # noqa: BLE001
            self.logger.error("Compensation in '%s' aborted: %s", namespace, e)
            return filenames

        for filename in leaked:
            self.logger.warning("Leaked file %s/%s (reason: %s)", namespace, filename, reason)
        return leaked
