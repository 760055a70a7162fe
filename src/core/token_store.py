"""
Refresh token 저장소 (in-memory).

규칙:
- 원문 대신 token_hash로만 조회
- rotation = 새 토큰 insert + 기존 토큰 revoke를 하나의 임계 구역에서 수행
- 저장소 조작은 threading.Lock으로 직렬화 (uvicorn worker thread 공유)
"""

import logging
import threading
from datetime import UTC, datetime

from src.core.ids import generate_token_id, generate_user_id
from src.domain.schemas import RefreshTokenRecord, User

logger = logging.getLogger(__name__)


class RefreshTokenStore:
    """
    사용자 + refresh token 저장소.

    Usage:
        store = RefreshTokenStore()
        user = store.upsert_user("a@example.com", "google-sub-1")
        record = store.insert(user.id, token_hash, expires_at)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}
        self._users_by_sub: dict[str, str] = {}
        self._tokens: dict[str, RefreshTokenRecord] = {}
        self._tokens_by_hash: dict[str, str] = {}

    # =========================================================================
    # Users
    # =========================================================================

    def upsert_user(self, email: str, google_sub: str) -> User:
        """
        google_sub 기준 upsert.

        이미 있으면 email만 갱신.
        """
        with self._lock:
            user_id = self._users_by_sub.get(google_sub)
            if user_id is not None:
                user = self._users[user_id]
                user.email = email
                return user

            user = User(
                id=generate_user_id(),
                email=email,
                google_sub=google_sub,
                created_at=datetime.now(UTC),
            )
            self._users[user.id] = user
            self._users_by_sub[google_sub] = user.id
            return user

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    # =========================================================================
    # Refresh Tokens
    # =========================================================================

    def insert(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshTokenRecord:
        """새 refresh token 레코드 저장."""
        with self._lock:
            return self._insert_locked(user_id, token_hash, expires_at)

    def _insert_locked(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshTokenRecord:
        if token_hash in self._tokens_by_hash:
            # token_hash unique 제약
            raise ValueError("Duplicate refresh token hash")

        record = RefreshTokenRecord(
            id=generate_token_id(),
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        self._tokens[record.id] = record
        self._tokens_by_hash[token_hash] = record.id
        return record

    def get(self, token_id: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._tokens.get(token_id)

    def find_active(self, token_hash: str, now: datetime) -> RefreshTokenRecord | None:
        """
        유효한 (미폐기 + 미만료) 토큰 조회.

        Returns:
            레코드 또는 None
        """
        with self._lock:
            token_id = self._tokens_by_hash.get(token_hash)
            if token_id is None:
                return None
            record = self._tokens[token_id]
            return record if record.is_active(now) else None

    def rotate(
        self,
        old: RefreshTokenRecord,
        new_hash: str,
        expires_at: datetime,
        now: datetime,
    ) -> RefreshTokenRecord | None:
        """
        Refresh token rotation.

        새 토큰 insert 후 기존 토큰을 revoke하고 replaced_by_token_id로 연결.
        동시에 같은 토큰으로 두 번 rotation하면 두 번째는 None.

        Returns:
            새 레코드 또는 None (기존 토큰이 이미 무효)
        """
        with self._lock:
            current = self._tokens.get(old.id)
            if current is None or not current.is_active(now):
                return None

            new_record = self._insert_locked(current.user_id, new_hash, expires_at)
            current.revoked_at = now
            current.replaced_by_token_id = new_record.id

        logger.info(f"Refresh token rotated: {old.id} -> {new_record.id}")
        return new_record

    def revoke_by_hash(self, token_hash: str, now: datetime) -> bool:
        """
        미폐기 토큰 revoke.

        Returns:
            revoke 여부 (없거나 이미 폐기면 False)
        """
        with self._lock:
            token_id = self._tokens_by_hash.get(token_hash)
            if token_id is None:
                return False
            record = self._tokens[token_id]
            if record.revoked_at is not None:
                return False
            record.revoked_at = now
            return True

    def revoke_all_for_user(self, user_id: str, now: datetime) -> int:
        """
        사용자의 미폐기 토큰 전부 revoke.

        Returns:
            revoke된 개수
        """
        count = 0
        with self._lock:
            for record in self._tokens.values():
                if record.user_id == user_id and record.revoked_at is None:
                    record.revoked_at = now
                    count += 1
        return count

    def purge_inactive(self, now: datetime) -> int:
        """
        폐기/만료 토큰 삭제.

        삭제된 토큰으로 refresh하면 모르는 토큰과 같이 무효 처리됨.

        Returns:
            삭제된 개수
        """
        with self._lock:
            stale = [record for record in self._tokens.values() if not record.is_active(now)]
            for record in stale:
                del self._tokens[record.id]
                self._tokens_by_hash.pop(record.token_hash, None)

        if stale:
            logger.info(f"Purged {len(stale)} inactive refresh token(s)")
        return len(stale)
