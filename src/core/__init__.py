"""
Core layer: 인증 핵심 모듈.

역할:
- env, 해시/ID, access JWT, refresh token 저장소
"""

from .env import is_mock_auth_enabled, is_production, require_env
from .hashing import generate_random_token, sha256_hex
from .ids import generate_jti, generate_token_id, generate_user_id
from .token_store import RefreshTokenStore
from .tokens import cookie_options, issue_access_jwt, verify_access_jwt

__all__ = [
    # env
    "require_env",
    "is_production",
    "is_mock_auth_enabled",
    # hashing
    "sha256_hex",
    "generate_random_token",
    # ids
    "generate_user_id",
    "generate_token_id",
    "generate_jti",
    # tokens
    "issue_access_jwt",
    "verify_access_jwt",
    "cookie_options",
    # token_store
    "RefreshTokenStore",
]
