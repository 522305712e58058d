# app/utils/__init__.py

"""
FastAPI 애플리케이션의 'utils' 패키지입니다.

특정 콘텐츠 도메인에 속하지 않는 HTTP 계층 유틸리티를 포함합니다.

주요 서브모듈:
- `files.py`: 업로드 이미지의 개수/크기/형식 검사, AssetInput 변환, 폼 필드 파싱.
"""

# flake8: noqa
from . import files

__title__ = "Atelier Application Utilities"
__description__ = "Upload validation and form helpers shared by the content routers."
__version__ = "0.1.0"
__all__ = ["files"]
