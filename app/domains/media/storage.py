# app/domains/media/storage.py

"""
이미지 파일의 물리적 저장을 담당하는 AssetStore 모듈입니다.

업로드 루트(upload_dir) 아래에 네임스페이스(products, blog, page-content 등)별 디렉토리를 두고
파일을 저장/삭제하며, 공개 주소(URL)를 조합합니다.
모든 파일 I/O는 aiofiles를 통해 비동기로 수행됩니다.
"""

import asyncio
import inspect
import logging
import uuid
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import aiofiles
import aiofiles.os

from app.core.exceptions import NotFoundError, StorageError

logger = logging.getLogger(__name__)

# 스트림 소스를 복사할 때 한 번에 읽는 크기 (1MB)
CHUNK_SIZE = 1024 * 1024


async def _call_blocking(func, *args):
    """코루틴 함수는 그대로 await 하고, 동기 함수는 asyncio.to_thread로 실행합니다."""
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    return await asyncio.to_thread(func, *args)


class AssetStore:
    """
    네임스페이스 단위로 파일을 저장하는 로컬 디스크 저장소입니다.

    Args:
        upload_dir: 모든 네임스페이스 디렉토리의 상위 경로
        storage_root: 공개 URL에서 업로드 루트를 가리키는 경로 조각 (예: "uploads")
    """

    def __init__(self, upload_dir: Union[str, Path], storage_root: str = "uploads"):
        self.upload_dir = Path(upload_dir)
        self.storage_root = storage_root.strip("/")

    # =========================================================================
    # 1. 경로 / 주소
    # =========================================================================
    def namespace_dir(self, namespace: str) -> Path:
        return self.upload_dir / namespace

    def path_for(self, filename: str, namespace: str) -> Path:
        # 파일명에 경로 구분자가 섞여 네임스페이스 밖으로 나가는 것을 막습니다.
        if not filename or Path(filename).name != filename:
            raise StorageError(f"Invalid stored filename: {filename!r}")
        return self.namespace_dir(namespace) / filename

    def url_for(self, filename: str, base_address: str, namespace: str) -> str:
        """
        `{base_address}/{storage_root}/{namespace}/{filename}` 형태의 공개 주소를 반환합니다.
        I/O가 없는 순수 함수이며 실패하지 않습니다.
        """
        base = (base_address or "").rstrip("/")
        return f"{base}/{self.storage_root}/{namespace}/{filename}"

    @staticmethod
    def generate_filename(original_name: str) -> str:
        """충돌 없는 저장 파일명을 생성합니다. 원본 확장자(소문자)는 유지합니다."""
        extension = Path(original_name or "").suffix.lower()
        return f"{uuid.uuid4().hex}{extension}"

    # =========================================================================
    # 2. 디렉토리 / 쓰기
    # =========================================================================
    async def ensure_namespace(self, namespace: str) -> None:
        """네임스페이스 디렉토리를 생성합니다. 이미 있으면 아무것도 하지 않습니다."""
        try:
            await aiofiles.os.makedirs(self.namespace_dir(namespace), exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to prepare storage namespace '{namespace}': {e}") from e

    async def write(self, source: Any, filename: str, namespace: str) -> Path:
        """
        자산 소스의 바이트를 `{upload_dir}/{namespace}/{filename}`에 기록합니다.

        source는 bytes, 동기 read()를 가진 파일 객체, 비동기 read()를 가진 객체(UploadFile) 중 하나입니다.
        실패하면 부분적으로 기록된 파일을 지우고 StorageError를 발생시킵니다.
        """
        path = self.path_for(filename, namespace)
        try:
            async with aiofiles.open(path, "wb") as f:
                if isinstance(source, (bytes, bytearray, memoryview)):
                    await f.write(bytes(source))
                else:
                    await self._copy_stream(source, f)
        except Exception as e:
            await self._remove_partial(path)
            if isinstance(e, StorageError):
                raise
            raise StorageError(f"Failed to write file '{filename}' to '{namespace}': {e}") from e

        logger.debug("Stored %s/%s", namespace, filename)
        return path

    @staticmethod
    async def _copy_stream(source: Any, target) -> None:
        """
        read()를 가진 소스를 청크 단위로 target에 복사합니다.
        동기 파일 객체의 read/seek는 asyncio.to_thread로 실행합니다.
        """
        read = getattr(source, "read", None)
        if read is None:
            raise StorageError(f"Unsupported asset source type: {type(source).__name__}")
        # UploadFile은 이전에 검증 과정에서 읽혔을 수 있으므로 처음으로 되돌립니다.
        seek = getattr(source, "seek", None)
        if seek is not None:
            await _call_blocking(seek, 0)
        while True:
            chunk = await _call_blocking(read, CHUNK_SIZE)
            if not chunk:
                break
            await target.write(chunk)

    async def _remove_partial(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove partially written file %s: %s", path, e)

    # =========================================================================
    # 3. 조회 / 삭제
    # =========================================================================
    async def exists(self, filename: str, namespace: str) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(filename, namespace))

    async def delete(self, filename: str, namespace: str) -> None:
        """파일이 없으면 NotFoundError, 그 외 OS 오류는 StorageError를 발생시킵니다."""
        path = self.path_for(filename, namespace)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise NotFoundError("File", f"{namespace}/{filename}") from e
        except OSError as e:
            raise StorageError(f"Failed to delete file '{namespace}/{filename}': {e}") from e
        logger.debug("Deleted %s/%s", namespace, filename)

    async def delete_many(self, filenames: Iterable[str], namespace: str) -> List[str]:
        """
        여러 파일을 최선 노력(best effort)으로 삭제합니다.
        개별 실패는 각각 경고 로그로 남기며, 예외를 발생시키지 않습니다.

        Returns:
            삭제하지 못한 파일명 목록
        """
        failed: List[str] = []
        for filename in filenames:
            try:
                await self.delete(filename, namespace)
            except (NotFoundError, StorageError) as e:
                logger.warning("Failed to delete %s/%s: %s", namespace, filename, e.message)
                failed.append(filename)
        return failed

    async def list_namespace(self, namespace: str) -> Dict[str, datetime]:
        """네임스페이스 안의 파일명과 마지막 수정 시각(UTC)을 반환합니다. 디렉토리가 없으면 빈 dict."""
        directory = self.namespace_dir(namespace)
        if not await aiofiles.os.path.isdir(directory):
            return {}
        entries: Dict[str, datetime] = {}
        for name in await aiofiles.os.listdir(directory):
            path = directory / name
            if not await aiofiles.os.path.isfile(path):
                continue
            stat = await aiofiles.os.stat(path)
            entries[name] = datetime.fromtimestamp(stat.st_mtime, UTC)
        return entries
