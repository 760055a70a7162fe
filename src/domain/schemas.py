"""
Data schemas for the auth gateway.

규칙:
- 시간 값은 모두 timezone-aware (UTC)
- refresh token 원문은 저장하지 않음 (sha256 해시만)
"""

import asyncio
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# =============================================================================
# Client State
# =============================================================================

@dataclass
class RefreshState:
    """
    Gateway의 refresh 진행 상태.

    gateway 인스턴스 하나가 소유 (프로세스 수명 동안 유지).

    불변식:
    - waiters는 refreshing=True인 동안에만 비어있지 않음
    - refresh가 끝나면 (성공/실패) waiters는 정확히 한 번 drain 후 비워짐
    """
    refreshing: bool = False
    waiters: deque[asyncio.Future[None]] = field(default_factory=deque)


# =============================================================================
# Server Records
# =============================================================================

@dataclass
class User:
    """사용자."""
    id: str
    email: str
    google_sub: str
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class RefreshTokenRecord:
    """
    Refresh token 레코드.

    rotation 시 이전 레코드는 revoked_at + replaced_by_token_id가 채워짐.
    """
    id: str
    user_id: str
    token_hash: str
    expires_at: datetime
    created_at: datetime
    revoked_at: datetime | None = None
    replaced_by_token_id: str | None = None

    def is_active(self, now: datetime) -> bool:
        """폐기되지 않았고 만료 전이면 True."""
        return self.revoked_at is None and self.expires_at > now


@dataclass
class AccessClaims:
    """검증된 access token claims."""
    user_id: str
    email: str
    expires_at: datetime
    jti: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "expires_at": self.expires_at.isoformat(),
        }


@dataclass
class IssuedSession:
    """로그인/refresh 결과: 쿠키로 내려갈 토큰 한 쌍."""
    user: User
    access_token: str
    refresh_token: str
