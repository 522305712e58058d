# app/domains/about/__init__.py

"""
FastAPI 애플리케이션의 'about' 도메인 패키지입니다.

소개 페이지의 섹션(제목, 문단 목록, 이미지 한 장)을 관리합니다.
섹션 이미지는 'about-sections' 네임스페이스에 저장되며 파일 교체를 지원합니다.
"""

__title__ = "About Domain"
__description__ = "Manages about page sections with a single image each."
__version__ = "0.1.0"
__all__ = []
