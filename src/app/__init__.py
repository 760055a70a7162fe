"""
App layer: 인증 API 서버 (FastAPI).

역할:
- refresh / logout / mock login / me API
- 보호 경로 route guard
- 토큰 저장/검증 로직은 core에 위임
"""
