# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈:

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 모든 도메인 CRUD 클래스가 상속하는 비동기 CRUDBase.
- `exceptions.py`: 도메인 오류 유형과 FastAPI 예외 핸들러.
- `dependencies.py`: FastAPI의 의존성 주입 시스템에서 사용될 공통 의존성 함수들.
- `tasks.py`: ARQ 워커가 실행하는 주기 작업.
"""

__title__ = "Atelier Core"
__description__ = "Core components for the Atelier content API."
__version__ = "0.1.0"
__all__ = []  # 'from app.core import *' 시 내보낼 이름 목록. 일반적으로 비워둡니다.
