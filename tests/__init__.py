# tests/__init__.py

"""
FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- tests/domains/test_media_*_n.py: media 코어 (저장소, 순서 정책, 보상 삭제, 리포지토리, 코디네이터, 스윕)
- tests/domains/test_<domain>_n.py: 콘텐츠 도메인 API 통합 테스트
"""
