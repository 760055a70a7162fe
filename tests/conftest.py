"""
Pytest fixtures for the auth gateway tests.
"""

from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from src.app.main import app, configure_app_state
from src.app.services.auth import AuthService
from src.core.token_store import RefreshTokenStore

TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests-only"

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Config Fixtures
# =============================================================================

@pytest.fixture
def jwt_secret() -> str:
    """테스트용 서명 키."""
    return TEST_JWT_SECRET


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정 (mock 로그인 활성)."""
    return {
        "auth": {
            "access_token_max_age": 600,
            "refresh_token_max_age": 3600,
            "mock_auth": True,
        },
        "client": {
            "base_url": "http://testserver",
        },
    }


@pytest.fixture(autouse=True)
def clean_auth_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """개발 환경 env가 테스트에 새지 않도록 정리."""
    monkeypatch.delenv("MOCK_AUTH", raising=False)
    monkeypatch.delenv("ENV", raising=False)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def token_store() -> RefreshTokenStore:
    """빈 refresh token 저장소."""
    return RefreshTokenStore()


@pytest.fixture
def auth_service(test_config: dict, token_store: RefreshTokenStore, jwt_secret: str) -> AuthService:
    """테스트용 AuthService."""
    return AuthService(config=test_config, store=token_store, jwt_secret=jwt_secret)


# =============================================================================
# App Fixtures
# =============================================================================

@pytest.fixture
def configured_app(test_config: dict, token_store: RefreshTokenStore, jwt_secret: str):
    """테스트 설정으로 구성된 FastAPI 앱."""
    configure_app_state(app, config=test_config, jwt_secret=jwt_secret, store=token_store)
    return app


@pytest.fixture
def client(configured_app) -> TestClient:
    """
    FastAPI TestClient (redirect 자동 추적 안 함).

    with 블록 없이 생성 → lifespan 미실행, configured_app의 state 유지.
    """
    return TestClient(configured_app, follow_redirects=False)
