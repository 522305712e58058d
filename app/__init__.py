# app/__init__.py

"""
Atelier 콘텐츠 관리 FastAPI 애플리케이션의 메인 패키지입니다.

작품(products), 블로그 글(blog), 페이지 섹션(pages)과 각 레코드에 연결된 이미지 자산을 관리합니다.
공통 설정, 데이터베이스 연결, 오류 처리를 담는 core 서브패키지와
레코드-이미지 일관성을 유지하는 media 코어, 그리고 각 콘텐츠 도메인 패키지로 구성됩니다.
"""

APP_NAME = "Atelier Content API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Administrative content API keeping records and stored images consistent."
__all__ = []
