"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: MOCK_AUTH=true uv run uvicorn src.app.main:app --reload
- 프로덕션: ENV=production uv run uvicorn src.app.main:app

필수 env: BOOKMAKER_JWT_SECRET
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI

from src.app.middleware import RouteGuardMiddleware
from src.app.routes import auth, pages
from src.app.services.auth import AuthService
from src.core.env import is_production, require_env
from src.core.token_store import RefreshTokenStore
from src.domain.constants import JWT_SECRET_ENV

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def configure_app_state(
    app: FastAPI,
    config: dict | None = None,
    jwt_secret: str | None = None,
    store: RefreshTokenStore | None = None,
) -> None:
    """
    app.state 초기화.

    lifespan에서 호출되며, lifespan을 돌리지 않는 transport(테스트 등)에서도 직접 호출 가능.

    Args:
        app: FastAPI 앱
        config: 설정 (None이면 default.yaml)
        jwt_secret: 서명 키 (None이면 env에서 필수 조회)
        store: refresh token 저장소 (None이면 새로 생성)
    """
    if config is None:
        config = load_config()

    if jwt_secret is None:
        secret_env = config.get("auth", {}).get("jwt_secret_env", JWT_SECRET_ENV)
        jwt_secret = require_env(secret_env)

    app.state.config = config
    app.state.production = is_production()
    app.state.token_store = store or RefreshTokenStore()
    app.state.auth_service = AuthService(
        config=config,
        store=app.state.token_store,
        jwt_secret=jwt_secret,
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 저장소/서비스 초기화
    """
    configure_app_state(app)

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Bookmaker Auth",
    description="Bookmaker 인증 API (토큰 refresh / logout)",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RouteGuardMiddleware)


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(pages.router, prefix="", tags=["Pages"])

# API 라우트
app.include_router(auth.api_router, prefix="/api/auth", tags=["Auth API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
