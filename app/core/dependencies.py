# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 파일 저장소(AssetStore) 제공 (get_asset_store).
- 자산 URL 생성에 사용할 요청별 기본 주소 (get_base_url).
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
# 실제 데이터베이스 세션 제너레이터 임포트
from app.core.database import get_session as get_main_app_session
from app.domains.media.storage import AssetStore


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    app.core.database.get_session을 래핑하여 사용합니다.
    """
    async for session in get_main_app_session():
        yield session


# --- 파일 저장소 의존성 주입 ---
def get_asset_store() -> AssetStore:
    """
    요청 시점의 설정값으로 AssetStore를 생성합니다.
    모듈 로드 시점이 아닌 런타임에 settings를 참조해야 monkeypatch된 UPLOAD_DIR이 반영됩니다.
    """
    return AssetStore(settings.UPLOAD_DIR, settings.STORAGE_ROOT)


def get_base_url(request: Request) -> str:
    """PUBLIC_BASE_URL이 설정되어 있으면 사용하고, 없으면 요청의 기본 주소를 사용합니다."""
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    return str(request.base_url).rstrip("/")
