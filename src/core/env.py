"""
환경변수 접근.

규칙:
- 필수 env 누락 시 ConfigError (fail-fast)
- env 이름은 서버 로그에만 남김, 예외 메시지에는 넣지 않음
"""

import logging
import os

from src.domain.constants import ENV_NAME_ENV, MOCK_AUTH_ENV
from src.domain.errors import ConfigError

logger = logging.getLogger(__name__)


def require_env(name: str) -> str:
    """
    필수 환경변수 조회.

    Args:
        name: 환경변수 이름

    Returns:
        환경변수 값

    Raises:
        ConfigError: 값이 없거나 빈 문자열일 때
    """
    value = os.environ.get(name)
    if not value:
        logger.error(f"[ConfigError] Missing required env: {name}")
        raise ConfigError(missing_env=name)
    return value


def is_production() -> bool:
    """ENV=production 여부."""
    return os.environ.get(ENV_NAME_ENV, "").lower() == "production"


def is_mock_auth_enabled(config: dict) -> bool:
    """
    Mock 로그인 활성화 여부.

    MOCK_AUTH env가 설정돼 있으면 config보다 우선.
    """
    env_value = os.environ.get(MOCK_AUTH_ENV)
    if env_value is not None:
        return env_value.lower() == "true"
    return bool(config.get("auth", {}).get("mock_auth", False))
