# tests/conftest.py

import os
from typing import AsyncGenerator, Callable, List

# 애플리케이션 설정이 로드되기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_atelier.db")
os.environ.setdefault("APP_ENV", "testing")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app  # noqa: E402
from app.core import dependencies as deps  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.domains.media.schemas import AssetInput  # noqa: E402
from app.domains.media.storage import AssetStore  # noqa: E402

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델 클래스가 임포트되어야 합니다.
from app.domains.models import *  # noqa: F401, F403, E402


# 가장 작은 형태의 유효한 이미지 바이트 (헤더만 검사 대상이 아니므로 내용은 임의)
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"0" * 64
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 64


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트마다 임시 디렉토리에 SQLite 파일 DB를 만들고 모든 테이블을 생성합니다.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,     # 각 연결이 독립적으로 사용되고 바로 닫히도록 함
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine: AsyncEngine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """API 호출과 별도의 세션으로 DB 상태를 직접 확인하기 위한 세션입니다."""
    async with session_factory() as session:
        yield session


# --- 파일 저장소 픽스처 ---
@pytest.fixture(scope="function")
def upload_dir(tmp_path, monkeypatch):
    """테스트마다 임시 업로드 디렉토리를 설정합니다."""
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    monkeypatch.setattr(settings, "PUBLIC_BASE_URL", None)
    return path


@pytest.fixture(scope="function")
def asset_store(upload_dir) -> AssetStore:
    return AssetStore(upload_dir, "uploads")


@pytest.fixture(scope="function")
def make_inputs() -> Callable[..., List[AssetInput]]:
    """원본 파일명 목록으로 AssetInput 목록을 만듭니다."""
    def _make(*names: str, **attributes) -> List[AssetInput]:
        return [
            AssetInput(
                source=JPEG_BYTES,
                original_name=name,
                mime_type="image/jpeg",
                size=len(JPEG_BYTES),
                attributes=dict(attributes),
            )
            for name in names
        ]
    return _make


# --- API 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(session_factory, upload_dir) -> AsyncGenerator[AsyncClient, None]:
    """
    DB 세션 의존성을 테스트 DB로 오버라이드한 비동기 HTTP 클라이언트입니다.
    """
    async def override_get_session():
        async with session_factory() as session:
            yield session

    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides[deps.get_db_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


def image_files(*names: str, content_type: str = "image/jpeg", data: bytes = JPEG_BYTES):
    """httpx multipart 업로드용 files 목록을 만듭니다."""
    return [("images", (name, data, content_type)) for name in names]
