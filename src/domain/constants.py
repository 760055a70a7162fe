"""
Domain Constants: 인증 관련 전역 상수.

경로, 쿠키 이름, 토큰 수명 등 client/server 양쪽에서 사용되는 값들.
"""

# =============================================================================
# API Paths
# =============================================================================

REFRESH_PATH = "/api/auth/refresh"
LOGOUT_PATH = "/api/auth/logout"
LOGIN_API_PATH = "/api/auth/login"
ME_PATH = "/api/auth/me"

# =============================================================================
# Page Paths (route guard)
# =============================================================================
# 인증 실패 시 이동 대상은 절대 경로로 고정

LOGIN_PATH = "/login"
POST_LOGIN_PATH = "/book"

PROTECTED_PREFIXES = ("/book",)
GUEST_ONLY_PATHS = ("/login",)

# =============================================================================
# Tokens & Cookies
# =============================================================================

ACCESS_TOKEN_COOKIE = "bookmaker_access_token"
REFRESH_TOKEN_COOKIE = "bookmaker_refresh_token"

ACCESS_TOKEN_MAX_AGE = 15 * 60  # 15분
REFRESH_TOKEN_MAX_AGE = 30 * 24 * 60 * 60  # 30일

JWT_ALGORITHM = "HS256"
JWT_ISSUER = "bookmaker"
JWT_AUDIENCE = "bookmaker-web"

REFRESH_TOKEN_BYTES = 32

# =============================================================================
# Environment Variables
# =============================================================================

JWT_SECRET_ENV = "BOOKMAKER_JWT_SECRET"
MOCK_AUTH_ENV = "MOCK_AUTH"
ENV_NAME_ENV = "ENV"
