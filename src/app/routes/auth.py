"""
Auth Routes: 토큰 refresh / logout / (mock) login / 현재 사용자.

- POST /api/auth/refresh → 토큰 rotation, 쿠키 재발급
- POST /api/auth/logout → refresh token revoke, 쿠키 삭제
- POST /api/auth/login → mock 로그인 (auth.mock_auth 활성 시에만)
- GET  /api/auth/me → access 쿠키 검증

에러 응답 형식: {"ok": false, "error": <public message>}
실패한 refresh/logout 응답에서는 인증 쿠키를 항상 삭제한다.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.app.services.auth import AuthService
from src.core.env import is_mock_auth_enabled
from src.core.tokens import cookie_options
from src.domain.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from src.domain.errors import HttpError
from src.domain.schemas import IssuedSession

logger = logging.getLogger(__name__)

api_router = APIRouter()


def get_auth_service(request: Request) -> AuthService:
    """Request에서 AuthService 가져오기."""
    return request.app.state.auth_service


def _error_response(error: Exception) -> JSONResponse:
    if isinstance(error, HttpError):
        return JSONResponse(
            {"ok": False, "error": error.public_message},
            status_code=error.status,
        )
    return JSONResponse(
        {"ok": False, "error": "Internal server error"},
        status_code=500,
    )


def _set_session_cookies(
    response: JSONResponse,
    session: IssuedSession,
    production: bool,
    service: AuthService,
) -> None:
    # 쿠키 수명 = 토큰 만료 (JWT exp, 저장소 expires_at)
    response.set_cookie(
        value=session.access_token,
        **cookie_options("access", production, max_age=service.access_max_age),
    )
    response.set_cookie(
        value=session.refresh_token,
        **cookie_options("refresh", production, max_age=service.refresh_max_age),
    )


def _clear_session_cookies(response: JSONResponse, production: bool) -> None:
    response.set_cookie(value="", **cookie_options("access", production, clear=True))
    response.set_cookie(value="", **cookie_options("refresh", production, clear=True))


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"[HttpError] Invalid JSON body: {e}")
        raise HttpError(400, "Invalid JSON") from e


# =============================================================================
# API Routes
# =============================================================================

@api_router.post("/refresh")
async def refresh(request: Request) -> JSONResponse:
    """Refresh token rotation + 새 access/refresh 쿠키."""
    production = request.app.state.production
    service = get_auth_service(request)
    try:
        session = service.refresh(request.cookies.get(REFRESH_TOKEN_COOKIE))
    except Exception as e:
        logger.error(f"Refresh auth error: {e}")
        response = _error_response(e)
        _clear_session_cookies(response, production)
        return response

    response = JSONResponse({"ok": True}, status_code=200)
    _set_session_cookies(response, session, production, service)
    return response


@api_router.post("/logout")
async def logout(request: Request) -> JSONResponse:
    """Refresh token revoke. 에러가 나도 쿠키는 삭제."""
    production = request.app.state.production
    try:
        get_auth_service(request).logout(request.cookies.get(REFRESH_TOKEN_COOKIE))
        response = JSONResponse({"ok": True}, status_code=200)
    except Exception as e:
        logger.error(f"Logout error: {e}")
        response = _error_response(e)

    _clear_session_cookies(response, production)
    return response


@api_router.post("/login")
async def login(request: Request) -> JSONResponse:
    """
    Mock 로그인.

    Body: {"email": str, "sub": str}
    identity provider 검증 없이 세션 발급 → 개발/테스트 전용.
    """
    if not is_mock_auth_enabled(request.app.state.config):
        return JSONResponse({"ok": False, "error": "Not found"}, status_code=404)

    service = get_auth_service(request)
    try:
        body = await _read_json(request)
        email = body.get("email") if isinstance(body, dict) else None
        sub = body.get("sub") if isinstance(body, dict) else None
        if not isinstance(email, str) or not email:
            raise HttpError(400, "Missing email")
        if not isinstance(sub, str) or not sub:
            raise HttpError(400, "Missing sub")

        session = service.start_session(email, sub)
    except Exception as e:
        logger.error(f"Login error: {e}")
        return _error_response(e)

    response = JSONResponse({"ok": True, "user": session.user.to_dict()}, status_code=200)
    _set_session_cookies(response, session, request.app.state.production, service)
    return response


@api_router.get("/me")
async def me(request: Request) -> JSONResponse:
    """현재 사용자 (access 쿠키 필요)."""
    try:
        claims = get_auth_service(request).current_user(
            request.cookies.get(ACCESS_TOKEN_COOKIE)
        )
    except HttpError as e:
        return _error_response(e)

    return JSONResponse({"ok": True, "user": claims.to_dict()})
