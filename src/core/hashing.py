"""
해시/랜덤 토큰: refresh token 원문 → 저장용 해시

규칙:
- refresh token 원문은 쿠키로만 전달, 저장소에는 SHA-256 hex만
- 랜덤 토큰은 URL-safe base64 (padding 없음)
"""

import base64
import hashlib
import secrets

from src.domain.constants import REFRESH_TOKEN_BYTES


def sha256_hex(value: str) -> str:
    """
    SHA-256 hex digest.

    Args:
        value: 원문 문자열

    Returns:
        64자 hex 문자열
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_random_token(byte_length: int = REFRESH_TOKEN_BYTES) -> str:
    """
    암호학적으로 안전한 랜덤 토큰 생성.

    Args:
        byte_length: 랜덤 바이트 수

    Returns:
        base64url 문자열 (padding 제거)
    """
    raw = secrets.token_bytes(byte_length)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
