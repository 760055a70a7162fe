"""
test_fetcher.py - fetch_json 테스트
"""

import httpx
import pytest

from src.client.fetcher import fetch_json
from src.client.gateway import AuthenticatedRequestGateway
from src.domain.constants import REFRESH_PATH
from src.domain.errors import FetchError


def make_gateway(handler) -> AuthenticatedRequestGateway:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://testserver"
    )
    return AuthenticatedRequestGateway(client)


class TestFetchJson:
    """fetch_json 함수 테스트."""

    @pytest.mark.asyncio
    async def test_returns_parsed_json(self):
        """2xx → JSON 반환."""
        gateway = make_gateway(lambda request: httpx.Response(200, json={"balance": 10}))

        data = await fetch_json(gateway, "/api/credits/balance")

        assert data == {"balance": 10}

    @pytest.mark.asyncio
    async def test_non_success_raises_fetch_error(self):
        """404 → FetchError (status, url 포함)."""
        gateway = make_gateway(lambda request: httpx.Response(404, json={"error": "nope"}))

        with pytest.raises(FetchError) as exc_info:
            await fetch_json(gateway, "/api/books/missing")

        assert exc_info.value.status == 404
        assert exc_info.value.url == "/api/books/missing"
        assert exc_info.value.code == "FETCH_FAILED"

    @pytest.mark.asyncio
    async def test_goes_through_refresh(self):
        """401 → gateway가 refresh 후 재시도한 결과를 파싱."""
        state = {"authorized": False}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == REFRESH_PATH:
                state["authorized"] = True
                return httpx.Response(200, json={"ok": True})
            if state["authorized"]:
                return httpx.Response(200, json=[{"id": "b1"}])
            return httpx.Response(401)

        gateway = make_gateway(handler)

        data = await fetch_json(gateway, "/api/books")

        assert data == [{"id": "b1"}]

    @pytest.mark.asyncio
    async def test_second_401_raises_fetch_error(self):
        """재시도도 401 → FetchError(401)."""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == REFRESH_PATH:
                return httpx.Response(200, json={"ok": True})
            return httpx.Response(401)

        gateway = make_gateway(handler)

        with pytest.raises(FetchError) as exc_info:
            await fetch_json(gateway, "/api/books")

        assert exc_info.value.status == 401
