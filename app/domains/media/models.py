# app/domains/media/models.py

"""
콘텐츠 부모 레코드와 이미지 자산 테이블이 공통으로 사용하는 SQLModel 필드를 정의하는 모듈입니다.

이 모듈의 클래스들은 테이블이 아니며(table=False), 각 콘텐츠 도메인의 models.py가
상속하여 실제 테이블(products/product_images 등)을 만듭니다.
컬럼 객체를 여러 테이블이 공유할 수 없으므로 sa_column 대신 sa_type/sa_column_kwargs를 사용합니다.
"""

from typing import Optional
from datetime import datetime, UTC

from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(UTC)


# =============================================================================
# 1. 부모 콘텐츠 레코드 공통 필드
# =============================================================================
class ContentRecordBase(SQLModel):
    """
    상품, 블로그 글, 페이지 섹션이 공유하는 표시 순서/공개 여부/타임스탬프 필드입니다.
    """
    sort_order: int = Field(default=0, index=True, description="형제 레코드 사이의 표시 순서")
    published: bool = Field(default=False, index=True, description="공개 여부")


class TimestampMixin(SQLModel):
    created_at: Optional[datetime] = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": func.now()},
        description="레코드 마지막 업데이트 일시"
    )


# =============================================================================
# 2. 이미지 자산 공통 필드
# =============================================================================
class MediaAssetBase(SQLModel):
    """
    저장된 이미지 한 장을 나타내는 자산 행의 공통 필드입니다.

    - filename: 네임스페이스 디렉토리 안의 실제 파일명 (삭제/교체에 사용)
    - url: 생성 시점의 기본 주소로 만든 공개 주소
    - position: 부모 안에서의 0부터 시작하는 표시 순서
    - is_primary: 대표(커버) 이미지 여부
    """
    filename: str = Field(max_length=255, description="저장된 파일명 (UUID + 원본 확장자)")
    url: str = Field(max_length=500, description="공개 접근 주소")
    alt_text: Optional[str] = Field(default=None, max_length=255, description="대체 텍스트")
    is_primary: bool = Field(default=False, index=True, description="대표 이미지 여부")
    position: int = Field(default=0, description="부모 내 표시 순서 (0부터 시작)")
    created_at: Optional[datetime] = Field(
        default_factory=utc_now,
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="레코드 생성 일시"
    )
