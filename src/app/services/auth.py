"""
Auth Service: 세션 발급 / refresh rotation / logout.

규칙:
- refresh token은 1회용 (rotation 시 기존 토큰 revoke + replaced_by 연결)
- 로그인 시 사용자의 기존 refresh token 전부 revoke
- 실패 사유는 HttpError(401, ...)로 route에 전달
"""

import logging
from datetime import UTC, datetime, timedelta

from src.core.hashing import generate_random_token, sha256_hex
from src.core.token_store import RefreshTokenStore
from src.core.tokens import issue_access_jwt, verify_access_jwt
from src.domain.constants import ACCESS_TOKEN_MAX_AGE, REFRESH_TOKEN_MAX_AGE
from src.domain.errors import HttpError
from src.domain.schemas import AccessClaims, IssuedSession, User

logger = logging.getLogger(__name__)


class AuthService:
    """
    인증 서비스.

    토큰 원문은 IssuedSession으로만 반환되고, 저장소에는 해시만 남음.
    """

    def __init__(
        self,
        config: dict,
        store: RefreshTokenStore,
        jwt_secret: str,
    ):
        """
        Args:
            config: 설정 (auth.access_token_max_age, auth.refresh_token_max_age)
            store: refresh token 저장소
            jwt_secret: access JWT 서명 키
        """
        auth_config = config.get("auth", {})
        self.store = store
        self.jwt_secret = jwt_secret
        self.access_max_age = int(
            auth_config.get("access_token_max_age", ACCESS_TOKEN_MAX_AGE)
        )
        self.refresh_max_age = int(
            auth_config.get("refresh_token_max_age", REFRESH_TOKEN_MAX_AGE)
        )

    def start_session(self, email: str, google_sub: str) -> IssuedSession:
        """
        로그인: 사용자 upsert + 새 토큰 한 쌍 발급.

        Args:
            email: 사용자 이메일
            google_sub: identity provider subject

        Returns:
            IssuedSession
        """
        now = datetime.now(UTC)
        user = self.store.upsert_user(email, google_sub)

        revoked = self.store.revoke_all_for_user(user.id, now)
        if revoked:
            logger.info(f"Revoked {revoked} previous refresh token(s) for user {user.id}")
        self.store.purge_inactive(now)

        refresh_token = generate_random_token()
        self.store.insert(
            user.id,
            sha256_hex(refresh_token),
            now + timedelta(seconds=self.refresh_max_age),
        )

        return IssuedSession(
            user=user,
            access_token=self._issue_access(user, now),
            refresh_token=refresh_token,
        )

    def refresh(self, refresh_token: str | None) -> IssuedSession:
        """
        Refresh token rotation.

        Raises:
            HttpError: 토큰 누락/무효/사용자 없음 (401)
        """
        if not refresh_token:
            raise HttpError(401, "Missing refresh token")

        now = datetime.now(UTC)
        record = self.store.find_active(sha256_hex(refresh_token), now)
        if record is None:
            raise HttpError(401, "Invalid refresh token")

        user = self.store.get_user(record.user_id)
        if user is None:
            raise HttpError(401, "User not found")

        new_refresh_token = generate_random_token()
        rotated = self.store.rotate(
            record,
            sha256_hex(new_refresh_token),
            now + timedelta(seconds=self.refresh_max_age),
            now,
        )
        if rotated is None:
            # 동시 rotation에서 진 쪽
            raise HttpError(401, "Invalid refresh token")

        return IssuedSession(
            user=user,
            access_token=self._issue_access(user, now),
            refresh_token=new_refresh_token,
        )

    def logout(self, refresh_token: str | None) -> bool:
        """
        Refresh token revoke.

        Returns:
            revoke 여부 (토큰 없음/이미 폐기면 False)
        """
        if not refresh_token or not refresh_token.strip():
            return False
        return self.store.revoke_by_hash(sha256_hex(refresh_token), datetime.now(UTC))

    def current_user(self, access_token: str | None) -> AccessClaims:
        """
        Access token 검증.

        Raises:
            HttpError: 토큰 없음 또는 무효 (401)
        """
        if not access_token:
            raise HttpError(401, "Missing access token")
        return verify_access_jwt(access_token, self.jwt_secret)

    def _issue_access(self, user: User, now: datetime) -> str:
        return issue_access_jwt(
            user.id,
            user.email,
            self.jwt_secret,
            now=now,
            max_age=self.access_max_age,
        )
