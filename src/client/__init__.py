"""
Client layer: 인증 요청 gateway.

역할:
- 401 응답 시 토큰 refresh 후 1회 재시도 (single-flight)
- refresh 실패 시 로그인 화면으로 이동
"""

from .fetcher import fetch_json
from .gateway import AuthenticatedRequestGateway, Navigator, create_gateway

__all__ = [
    "AuthenticatedRequestGateway",
    "Navigator",
    "create_gateway",
    "fetch_json",
]
