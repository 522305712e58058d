# app/domains/models/__init__.py

"""
이 파일은 모든 콘텐츠 도메인의 SQLModel 모델들을 한 곳에서 중앙 관리하여,
다른 모듈에서 쉽게 임포트할 수 있도록 하는 역할을 합니다.
SQLModel.metadata가 모든 테이블을 인식하도록 보장합니다.
"""

# products (Product, ProductImage)
from app.domains.products.models import Product, ProductImage, ProductCategory, ProductStatus

# blog (BlogArticle, BlogArticleImage)
from app.domains.blog.models import BlogArticle, BlogArticleImage

# pages (PageSection, PageSectionImage)
from app.domains.pages.models import PageSection, PageSectionImage

# about (AboutSection, AboutSectionImage)
from app.domains.about.models import AboutSection, AboutSectionImage


#  `from app.domains.models import *` 구문으로 임포트될 모델 목록 정의
__all__ = [
    "Product", "ProductImage", "ProductCategory", "ProductStatus",
    "BlogArticle", "BlogArticleImage",
    "PageSection", "PageSectionImage",
    "AboutSection", "AboutSectionImage",
]
