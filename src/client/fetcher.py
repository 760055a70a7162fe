"""
JSON fetcher: gateway 경유 GET → 2xx 아니면 FetchError.

클라이언트 캐시 계층(SWR류)의 fetcher 역할.
"""

from typing import Any

from src.client.gateway import AuthenticatedRequestGateway
from src.domain.errors import FetchError


async def fetch_json(
    gateway: AuthenticatedRequestGateway,
    url: str,
    **options: Any,
) -> Any:
    """
    gateway로 요청 후 JSON 반환.

    Args:
        gateway: 공유 gateway 인스턴스
        url: 요청 URL
        **options: gateway.send 인자 (method 포함 가능)

    Returns:
        파싱된 JSON

    Raises:
        FetchError: 2xx가 아닌 응답
    """
    response = await gateway.send(url, **options)
    if not response.is_success:
        raise FetchError(response.status_code, url)
    return response.json()
