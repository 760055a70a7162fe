"""
ID 생성: user_id, token_id, jti
"""

import uuid


def generate_user_id() -> str:
    """사용자 ID (UUID v4)."""
    return str(uuid.uuid4())


def generate_token_id() -> str:
    """Refresh token 레코드 ID (UUID v4)."""
    return str(uuid.uuid4())


def generate_jti() -> str:
    """
    Access JWT의 jti.

    디버깅/폐기 전략용. 고유성만 보장하면 됨.
    """
    return uuid.uuid4().hex
