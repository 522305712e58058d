# app/domains/blog/__init__.py

"""
FastAPI 애플리케이션의 'blog' 도메인 패키지입니다.

블로그 글과 본문 이미지를 관리합니다. 이미지는 'blog' 네임스페이스에 저장되며,
첫 번째 이미지가 커버 이미지가 됩니다.
"""

__title__ = "Blog Domain"
__description__ = "Manages blog articles, slugs and article images."
__version__ = "0.1.0"
__all__ = []
