"""
Access JWT 발급/검증 + 인증 쿠키 옵션.

규칙:
- HS256, issuer=bookmaker, audience=bookmaker-web
- 검증 실패 상세는 로그로만, 호출자에게는 401 "Invalid credentials"
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.core.ids import generate_jti
from src.domain.constants import (
    ACCESS_TOKEN_COOKIE,
    ACCESS_TOKEN_MAX_AGE,
    JWT_ALGORITHM,
    JWT_AUDIENCE,
    JWT_ISSUER,
    REFRESH_TOKEN_COOKIE,
    REFRESH_TOKEN_MAX_AGE,
)
from src.domain.errors import HttpError
from src.domain.schemas import AccessClaims

logger = logging.getLogger(__name__)


def issue_access_jwt(
    user_id: str,
    email: str,
    secret: str,
    now: datetime | None = None,
    max_age: int = ACCESS_TOKEN_MAX_AGE,
) -> str:
    """
    Access JWT 발급.

    Args:
        user_id: subject
        email: 사용자 이메일 (claim)
        secret: 서명 키
        now: 발급 시각 (None이면 현재 UTC)
        max_age: 유효 시간(초)

    Returns:
        서명된 JWT 문자열
    """
    issued_at = now or datetime.now(UTC)
    claims = {
        "sub": user_id,
        "email": email,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(seconds=max_age)).timestamp()),
        "jti": generate_jti(),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def verify_access_jwt(token: str, secret: str) -> AccessClaims:
    """
    Access JWT 검증.

    Raises:
        HttpError: 서명/만료/issuer/audience 불일치 또는 claim 누락 (401)
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except JWTError as e:
        logger.info(f"Access token rejected: {e}")
        raise HttpError(401, "Invalid credentials") from e

    user_id = payload.get("sub")
    email = payload.get("email")
    if not isinstance(user_id, str) or not isinstance(email, str):
        raise HttpError(401, "Invalid credentials")

    return AccessClaims(
        user_id=user_id,
        email=email,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        jti=payload.get("jti"),
    )


# =============================================================================
# Cookie Options
# =============================================================================

_COOKIE_SETTINGS = {
    "access": (ACCESS_TOKEN_COOKIE, ACCESS_TOKEN_MAX_AGE),
    "refresh": (REFRESH_TOKEN_COOKIE, REFRESH_TOKEN_MAX_AGE),
}


def cookie_options(
    kind: str,
    production: bool,
    clear: bool = False,
    max_age: int | None = None,
) -> dict[str, Any]:
    """
    인증 쿠키 옵션 (Starlette set_cookie 키워드 인자).

    Args:
        kind: "access" 또는 "refresh"
        production: True면 secure 쿠키
        clear: True면 max_age=0 (쿠키 삭제용)
        max_age: 쿠키 수명 (초). 토큰 자체의 만료와 같아야 함 (None이면 기본값)

    Returns:
        key, max_age, httponly, secure, samesite, path
    """
    if kind not in _COOKIE_SETTINGS:
        raise ValueError(f"Unknown cookie kind: {kind}")

    name, default_max_age = _COOKIE_SETTINGS[kind]
    if max_age is None:
        max_age = default_max_age
    return {
        "key": name,
        "max_age": 0 if clear else max_age,
        "httponly": True,
        "secure": production,
        "samesite": "lax",
        "path": "/",
    }
