# app/domains/products/__init__.py

"""
FastAPI 애플리케이션의 'products' 도메인 패키지입니다.

벽걸이(wall-hanging)와 러그(rug) 작품 카탈로그를 관리하며,
작품마다 1장 이상의 이미지가 'products' 네임스페이스에 저장됩니다.

주요 서브모듈:
- `models.py`: Product, ProductImage 테이블 모델.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 필터/통계/홈 그리드 조회와 ProductRepository.
- `services.py`: 작품용 MediaCreationCoordinator 구성.
- `routers.py`: 작품 및 작품 이미지 API 엔드포인트.
"""

__title__ = "Products Domain"
__description__ = "Manages catalog items and their ordered images."
__version__ = "0.1.0"
__all__ = []
