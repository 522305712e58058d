# app/main.py

"""
FastAPI 애플리케이션 진입점입니다.

- 로깅 설정, 수명 주기(lifespan) 핸들러, ARQ 워커 설정
- 업로드 파일 정적 서빙 (/{STORAGE_ROOT}/{namespace}/{filename})
- 도메인 오류 핸들러 및 도메인 라우터 등록
"""

import logging
from pathlib import Path
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from arq import cron
from arq.connections import RedisSettings
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# 핵심 설정 및 데이터베이스 모듈 임포트
from app import API_PREFIX
from app.core.config import settings
from app.core.database import create_db_and_tables, engine
from app.core.dependencies import get_db_session
from app.core.exceptions import register_exception_handlers

# 태스크 모듈 임포트
from app.core import tasks as core_tasks

# 도메인 라우터 임포트
from app.domains.products.routers import router as products_router
from app.domains.blog.routers import router as blog_router
from app.domains.pages.routers import router as pages_router
from app.domains.about.routers import router as about_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ARQ 워커 설정 클래스
# 실행: arq app.main.ArqWorkerSettings
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = [
        core_tasks.health_check_database_task,
        core_tasks.cleanup_orphaned_files_task,
    ]
    cron_jobs = [
        cron(core_tasks.health_check_database_task, hour={0}, minute={0}, timeout=300),
        # 매일 새벽 1시에 고아 파일 정리
        cron(core_tasks.cleanup_orphaned_files_task, hour={1}, minute={0}, timeout=1800),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    시작 시 업로드 디렉토리를 준비하고 (개발 환경에서는) 테이블을 생성합니다.
    종료 시 데이터베이스 연결 풀을 정리합니다.
    """
    logger.info("Starting %s (%s)", settings.APP_NAME, settings.APP_ENV)
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    if settings.APP_ENV == "development":
        await create_db_and_tables()

    yield  # 애플리케이션 실행

    await engine.dispose()
    logger.info("Database connection pool disposed")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",       # Swagger UI (Interactive API documentation)
    redoc_url="/redoc",     # ReDoc (Alternative API documentation)
    lifespan=lifespan
)

# 업로드된 이미지 정적 서빙. 자산 URL의 {STORAGE_ROOT} 경로 조각과 일치해야 합니다.
app.mount(
    f"/{settings.STORAGE_ROOT.strip('/')}",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)

# -- CORS (Cross-Origin Resource Sharing) 미들웨어 설정 --
# 보안을 위해 'allow_origins'는 실제 관리자 UI 도메인으로 제한해야 합니다.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 도메인 오류 -> HTTP 응답 변환 --
register_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(products_router, prefix=f"{API_PREFIX}/products", tags=["Products (작품 관리)"])
app.include_router(blog_router, prefix=f"{API_PREFIX}/blog", tags=["Blog (블로그 관리)"])
app.include_router(pages_router, prefix=f"{API_PREFIX}/pages", tags=["Page Content (페이지 콘텐츠 관리)"])
app.include_router(about_router, prefix=f"{API_PREFIX}/about-sections", tags=["About Sections (소개 섹션 관리)"])


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
    except Exception as e:
        logger.exception("Health check failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        ) from e
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Database health check failed: No result from test query"
    )
