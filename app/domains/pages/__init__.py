# app/domains/pages/__init__.py

"""
FastAPI 애플리케이션의 'pages' 도메인 패키지입니다.

페이지(page)와 섹션(section) 키로 식별되는 CMS 콘텐츠 블록을 관리합니다.
섹션 이미지는 'page-content' 네임스페이스에 저장되며 파일 교체를 지원합니다.
"""

__title__ = "Pages Domain"
__description__ = "Manages CMS page sections and their images."
__version__ = "0.1.0"
__all__ = []
