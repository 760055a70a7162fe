"""
AuthenticatedRequestGateway: 401 → 토큰 refresh → 원 요청 1회 재시도.

규칙:
- refresh는 프로세스 전체에서 동시에 최대 1개 (single-flight)
- refresh 진행 중 401을 받은 호출자는 waiters(FIFO)에 future로 대기
- 재시도는 요청당 정확히 1회 (재시도 결과가 다시 401이어도 그대로 반환)
- 401이 아닌 응답은 (4xx/5xx 포함) 손대지 않고 반환
- refresh 실패 → login 경로로 이동 + triggering 호출자에게 RefreshFailed

동시성:
- 단일 이벤트 루프 전제. refreshing 확인 → 설정 사이에 await가 없으므로 원자적.
- 멀티스레드에서 공유하려면 이 구간을 mutex/CAS로 보호해야 함.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx

from src.domain.constants import LOGIN_PATH, REFRESH_PATH
from src.domain.errors import GatewayError, RefreshFailed, TransportError
from src.domain.schemas import RefreshState

logger = logging.getLogger(__name__)


class Navigator:
    """
    인증 불가 시 화면 이동 대상.

    location에 마지막 이동 경로를 기록하고, on_navigate 콜백이 있으면 호출.
    """

    def __init__(self, on_navigate: Callable[[str], Any] | None = None) -> None:
        self.location: str | None = None
        self._on_navigate = on_navigate

    def assign(self, path: str) -> None:
        self.location = path
        if self._on_navigate is not None:
            self._on_navigate(path)


class AuthenticatedRequestGateway:
    """
    Bearer token refresh를 투명하게 처리하는 요청 gateway.

    프로세스 시작 시 한 번 생성해서 모든 호출부가 같은 인스턴스를 공유.

    Usage:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
            gateway = AuthenticatedRequestGateway(client)
            response = await gateway.send("/api/auth/me")
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        refresh_path: str = REFRESH_PATH,
        login_path: str = LOGIN_PATH,
        navigator: Navigator | None = None,
    ) -> None:
        """
        Args:
            client: transport (쿠키 jar로 credential 자동 전달)
            refresh_path: refresh endpoint 경로
            login_path: refresh 실패 시 이동할 절대 경로
            navigator: 이동 처리기 (None이면 기본 Navigator)
        """
        self.client = client
        self.refresh_path = refresh_path
        self.login_path = login_path
        self.navigator = navigator or Navigator()
        self._state = RefreshState()

    @property
    def state(self) -> RefreshState:
        """현재 refresh 상태 (조회용)."""
        return self._state

    async def send(self, url: str, method: str = "GET", **options: Any) -> httpx.Response:
        """
        요청 전송.

        Args:
            url: 요청 URL (client base_url 기준 상대 경로 가능)
            method: HTTP 메서드
            **options: httpx.AsyncClient.request 키워드 인자 (json, headers 등)

        Returns:
            transport가 돌려준 응답 (401 처리 후)

        Raises:
            TransportError: 네트워크 호출 실패
            RefreshFailed: 토큰 refresh 실패 (triggering 호출자 및 대기자)
        """
        response = await self._issue(method, url, options)
        if response.status_code != 401:
            return response

        state = self._state
        if state.refreshing:
            waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
            state.waiters.append(waiter)
            logger.debug(f"Queued behind in-flight refresh: {method} {url}")
            await waiter
            return await self._issue(method, url, options)

        state.refreshing = True
        try:
            await self.refresh_access_token()
            self._resume_waiters()
        except Exception as e:
            logger.warning(f"Token refresh failed, redirecting to {self.login_path}: {e}")
            # 이동 콜백이 실패해도 대기자는 RefreshFailed로 깨어나야 함
            self._reject_waiters(e)
            self.navigator.assign(self.login_path)
            raise
        finally:
            # 취소된 경우에만 남아있음
            while state.waiters:
                state.waiters.popleft().cancel()
            state.refreshing = False

        return await self._issue(method, url, options)

    async def refresh_access_token(self) -> dict[str, Any]:
        """
        refresh endpoint 호출.

        쿠키는 client의 cookie jar로 자동 전달/갱신됨.

        Returns:
            응답 JSON (예: {"ok": true})

        Raises:
            RefreshFailed: 2xx가 아닌 응답
            TransportError: 네트워크 실패
        """
        logger.info("Refreshing access token")
        response = await self._issue("POST", self.refresh_path, {})

        if not response.is_success:
            raise RefreshFailed(_error_message(response), status=response.status_code)

        return _json_or_empty(response)

    async def _issue(self, method: str, url: str, options: dict[str, Any]) -> httpx.Response:
        try:
            return await self.client.request(method, url, **options)
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__, method=method, url=url) from e

    def _resume_waiters(self) -> None:
        waiters = self._state.waiters
        while waiters:
            waiter = waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)

    def _reject_waiters(self, cause: Exception) -> None:
        # 대기자를 pending으로 남기지 않고 RefreshFailed로 깨움
        waiters = self._state.waiters
        if waiters:
            logger.warning(f"Rejecting {len(waiters)} queued request(s) after failed refresh")
        status = cause.status if isinstance(cause, RefreshFailed) else None
        message = cause.message if isinstance(cause, GatewayError) else str(cause)
        while waiters:
            waiter = waiters.popleft()
            if not waiter.done():
                waiter.set_exception(RefreshFailed(message, status=status))


def _error_message(response: httpx.Response) -> str:
    """refresh 실패 응답의 error 필드 (없으면 기본 메시지)."""
    data = _json_or_empty(response)
    error = data.get("error")
    return error if isinstance(error, str) and error else "Refresh failed"


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def create_gateway(
    config: dict,
    client: httpx.AsyncClient | None = None,
    navigator: Navigator | None = None,
) -> AuthenticatedRequestGateway:
    """
    config의 client 섹션으로 gateway 생성.

    Args:
        config: 설정 (client.base_url, client.refresh_path, client.login_path, client.timeout)
        client: 주입할 transport (None이면 config 기반 생성)
        navigator: 이동 처리기

    Returns:
        AuthenticatedRequestGateway
    """
    client_config = config.get("client", {})
    if client is None:
        client = httpx.AsyncClient(
            base_url=client_config.get("base_url", "http://127.0.0.1:8000"),
            timeout=client_config.get("timeout", 30.0),
        )

    return AuthenticatedRequestGateway(
        client,
        refresh_path=client_config.get("refresh_path", REFRESH_PATH),
        login_path=client_config.get("login_path", LOGIN_PATH),
        navigator=navigator,
    )
