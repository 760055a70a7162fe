"""
Route guard: 보호 경로/게스트 전용 경로 리다이렉트.

- 보호 경로 + access 쿠키 없음 → /login?next=<원래 경로>
- 게스트 전용 경로 + access 쿠키 있음 → /book
- 쿠키 존재 여부만 확인 (서명 검증은 API 쪽 책임)
"""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.domain.constants import (
    ACCESS_TOKEN_COOKIE,
    GUEST_ONLY_PATHS,
    LOGIN_PATH,
    POST_LOGIN_PATH,
    PROTECTED_PREFIXES,
)


def has_access_token_cookie(request: Request) -> bool:
    value = request.cookies.get(ACCESS_TOKEN_COOKIE)
    return isinstance(value, str) and len(value.strip()) > 0


def is_protected_path(pathname: str) -> bool:
    """prefix 자체 또는 그 하위 경로만 (/bookmarks 등은 제외)."""
    return any(
        pathname == prefix or pathname.startswith(f"{prefix}/")
        for prefix in PROTECTED_PREFIXES
    )


def is_guest_only_path(pathname: str) -> bool:
    return pathname in GUEST_ONLY_PATHS


def login_redirect_url(request: Request) -> str:
    """로그인 URL (next=원래 경로+쿼리)."""
    next_path = request.url.path
    if request.url.query:
        next_path = f"{next_path}?{request.url.query}"
    return str(
        request.url.replace(path=LOGIN_PATH, query="").include_query_params(next=next_path)
    )


def post_login_url(request: Request) -> str:
    return str(request.url.replace(path=POST_LOGIN_PATH, query=""))


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """보호 경로 접근 제어."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        pathname = request.url.path
        has_access_token = has_access_token_cookie(request)

        if is_protected_path(pathname) and not has_access_token:
            return RedirectResponse(login_redirect_url(request), status_code=307)

        if is_guest_only_path(pathname) and has_access_token:
            return RedirectResponse(post_login_url(request), status_code=307)

        return await call_next(request)
