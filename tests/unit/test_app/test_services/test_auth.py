"""
test_auth.py - AuthService 테스트

DoD:
- 로그인 시 기존 refresh token 전부 revoke
- refresh rotation: 새 토큰 발급, 기존 토큰 재사용 불가
- 실패 사유별 401 메시지
- logout은 토큰이 없어도 에러 없음
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.app.services.auth import AuthService
from src.core.hashing import sha256_hex
from src.core.tokens import issue_access_jwt
from src.domain.errors import HttpError

# =============================================================================
# start_session
# =============================================================================

class TestStartSession:
    """start_session 테스트."""

    def test_issues_token_pair(self, auth_service: AuthService, token_store):
        """access JWT + refresh token 발급, 저장소엔 해시만."""
        session = auth_service.start_session("a@example.com", "sub-a")

        assert session.user.email == "a@example.com"
        assert session.access_token.count(".") == 2
        now = datetime.now(UTC)
        assert token_store.find_active(sha256_hex(session.refresh_token), now) is not None
        assert token_store.find_active(session.refresh_token, now) is None

    def test_relogin_revokes_previous(self, auth_service: AuthService, token_store):
        """재로그인 → 이전 refresh token 무효."""
        first = auth_service.start_session("a@example.com", "sub-a")
        second = auth_service.start_session("a@example.com", "sub-a")
        now = datetime.now(UTC)

        assert token_store.find_active(sha256_hex(first.refresh_token), now) is None
        assert token_store.find_active(sha256_hex(second.refresh_token), now) is not None

    def test_relogin_purges_inactive_records(self, auth_service: AuthService, token_store):
        """재로그인 → 폐기된 이전 레코드는 저장소에서 삭제."""
        first = auth_service.start_session("a@example.com", "sub-a")
        now = datetime.now(UTC)
        first_record = token_store.find_active(sha256_hex(first.refresh_token), now)

        auth_service.start_session("a@example.com", "sub-a")

        assert token_store.get(first_record.id) is None

    def test_refresh_ttl_from_config(self, auth_service: AuthService, token_store):
        """refresh_token_max_age 반영 (test_config: 3600초)."""
        session = auth_service.start_session("a@example.com", "sub-a")
        now = datetime.now(UTC)

        record = token_store.find_active(sha256_hex(session.refresh_token), now)

        assert record.expires_at <= now + timedelta(seconds=3600)
        assert record.expires_at > now + timedelta(seconds=3500)


# =============================================================================
# refresh
# =============================================================================

class TestRefresh:
    """refresh 테스트."""

    def test_rotates_token(self, auth_service: AuthService):
        """새 refresh token 발급, 사용자 유지."""
        session = auth_service.start_session("a@example.com", "sub-a")

        refreshed = auth_service.refresh(session.refresh_token)

        assert refreshed.refresh_token != session.refresh_token
        assert refreshed.user.id == session.user.id
        claims = auth_service.current_user(refreshed.access_token)
        assert claims.user_id == session.user.id

    def test_reuse_of_rotated_token_fails(self, auth_service: AuthService):
        """rotation된 토큰 재사용 → 401."""
        session = auth_service.start_session("a@example.com", "sub-a")
        auth_service.refresh(session.refresh_token)

        with pytest.raises(HttpError) as exc_info:
            auth_service.refresh(session.refresh_token)

        assert exc_info.value.status == 401
        assert exc_info.value.public_message == "Invalid refresh token"

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, auth_service: AuthService, token):
        """토큰 없음 → 401 Missing refresh token."""
        with pytest.raises(HttpError) as exc_info:
            auth_service.refresh(token)

        assert exc_info.value.public_message == "Missing refresh token"

    def test_unknown_token(self, auth_service: AuthService):
        """모르는 토큰 → 401 Invalid refresh token."""
        with pytest.raises(HttpError) as exc_info:
            auth_service.refresh("never-issued")

        assert exc_info.value.public_message == "Invalid refresh token"

    def test_user_not_found(self, auth_service: AuthService, token_store):
        """사용자 없는 토큰 → 401 User not found."""
        token_store.insert(
            "ghost-user",
            sha256_hex("orphan-token"),
            datetime.now(UTC) + timedelta(days=1),
        )

        with pytest.raises(HttpError) as exc_info:
            auth_service.refresh("orphan-token")

        assert exc_info.value.public_message == "User not found"


# =============================================================================
# logout / current_user
# =============================================================================

class TestLogout:
    """logout 테스트."""

    def test_revokes_token(self, auth_service: AuthService):
        """logout 후 refresh 불가."""
        session = auth_service.start_session("a@example.com", "sub-a")

        assert auth_service.logout(session.refresh_token) is True
        with pytest.raises(HttpError):
            auth_service.refresh(session.refresh_token)

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_without_token(self, auth_service: AuthService, token):
        """토큰 없음 → False, 에러 없음."""
        assert auth_service.logout(token) is False


class TestCurrentUser:
    """current_user 테스트."""

    def test_missing_access_token(self, auth_service: AuthService):
        """쿠키 없음 → 401."""
        with pytest.raises(HttpError) as exc_info:
            auth_service.current_user(None)

        assert exc_info.value.status == 401

    def test_foreign_signature(self, auth_service: AuthService):
        """다른 키로 서명된 토큰 → 401."""
        token = issue_access_jwt("user-1", "a@example.com", "someone-elses-secret")

        with pytest.raises(HttpError):
            auth_service.current_user(token)
