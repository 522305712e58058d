# app/core/config.py

from typing import Any, List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일을 명시적으로 지정
        env_file_encoding='utf-8',           # .env 파일 인코딩
        extra='ignore',                      # .env 파일에 정의되었지만 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Atelier Content API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "상품, 블로그 글, 페이지 섹션과 이미지 자산을 관리하는 관리자 API"
    # 애플리케이션 환경 (예: "development", "production", "testing")
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    # 디버그 모드 활성화 여부
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and SQL echo")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ERROR)")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async database connection URL (postgresql+asyncpg://...)")

    # --- 파일 업로드 설정 ---
    # UPLOAD_DIR: 네임스페이스(products, blog, page-content) 디렉토리들이 만들어지는 최상위 경로
    UPLOAD_DIR: str = Field("/app/data/uploads", description="Directory for uploaded files.")
    # 공개 URL에 들어가는 경로 조각: {base}/{STORAGE_ROOT}/{namespace}/{filename}
    STORAGE_ROOT: str = Field("uploads", description="Public path segment under which uploads are served")
    # 프록시 뒤에서 운영할 때 요청 호스트 대신 사용할 기본 주소
    PUBLIC_BASE_URL: Optional[str] = Field(None, description="Base address used to build asset URLs")

    MAX_UPLOAD_SIZE_BYTES: int = Field(5 * 1024 * 1024, description="Maximum size of one uploaded image")
    ALLOWED_IMAGE_TYPES: List[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/jpg", "image/png", "image/webp"],
        description="Accepted image MIME types",
    )
    MAX_PRODUCT_IMAGES: int = Field(5, description="Images per product upload request")
    MAX_BLOG_IMAGES: int = Field(10, description="Images per blog article upload request")
    MAX_PAGE_IMAGES: int = Field(5, description="Images per page section upload request")

    # --- 백그라운드 작업 (ARQ) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ worker")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ worker")
    # 레코드 생성 전에 먼저 기록되는 파일이 있으므로, 이 시간보다 오래된 파일만 고아 파일로 판단합니다.
    ORPHAN_GRACE_MINUTES: int = Field(60, description="Minimum age before an unreferenced file is swept")

    # Post-initialization validation (Pydantic v2 BaseSettings)
    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        # APP_ENV가 development이고, UPLOAD_DIR이 기본값인 경우 로컬 경로로 변경
        if self.APP_ENV == "development" and self.UPLOAD_DIR == "/app/data/uploads":
            # BASE_DIR을 기준으로 로컬 경로 설정
            self.UPLOAD_DIR = os.path.join(BASE_DIR, "data", "uploads")


settings = Settings()
