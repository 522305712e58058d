# app/domains/media/__init__.py

"""
콘텐츠 레코드와 이미지 자산의 일관성을 유지하는 'media' 코어 패키지입니다.

하나의 부모 레코드(상품, 블로그 글, 페이지 섹션)에 순서가 있는 여러 이미지 자산이
연결되는 구조를 공통으로 처리하며, 각 콘텐츠 도메인은 이 패키지를 조합하여 사용합니다.

주요 서브모듈:
- `models.py`: 부모 레코드/자산 테이블이 공유하는 SQLModel 필드 정의.
- `schemas.py`: 자산 입력(AssetInput), 결과 묶음(MediaBundle), 응답/수정 스키마.
- `storage.py`: 파일 저장소(AssetStore) - URL 생성, 쓰기, 존재 확인, 삭제.
- `ordering.py`: 위치(position)와 대표 이미지 지정 정책 (순수 함수).
- `compensator.py`: 후속 단계 실패 시 이미 기록된 파일을 되돌리는 보상 삭제.
- `repository.py`: 부모/자산 영속성 인터페이스와 SQL, 인메모리 구현.
- `services.py`: 생성/추가/교체/삭제 흐름을 조율하는 MediaCreationCoordinator.
- `tasks.py`: 어떤 자산 행도 참조하지 않는 파일을 정리하는 스윕 로직.
"""

__title__ = "Media Core"
__description__ = "Keeps content records and their stored image files consistent."
__all__ = []
