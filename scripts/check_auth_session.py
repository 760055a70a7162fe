#!/usr/bin/env python
"""
check_auth_session.py - 실행 중인 서버에 대해 gateway refresh 흐름 점검

순서:
1. mock 로그인 (/api/auth/login) → 쿠키 발급
2. /api/auth/me 호출
3. access 쿠키를 버리고 동시 요청 N개 → refresh 1회 후 전부 200인지 확인

사용법:
    MOCK_AUTH=true uv run uvicorn src.app.main:app  # 다른 터미널
    uv run python scripts/check_auth_session.py --concurrency 5
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

# .env 파일 로드
from dotenv import load_dotenv
load_dotenv()

import httpx

from src.app.main import load_config
from src.client.gateway import create_gateway
from src.domain.constants import ACCESS_TOKEN_COOKIE, LOGIN_API_PATH, ME_PATH
from src.domain.errors import GatewayError

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


async def check_session(base_url: str | None, concurrency: int, email: str) -> bool:
    """로그인 → me → 강제 만료 후 동시 요청."""
    config = load_config()
    if base_url:
        config.setdefault("client", {})["base_url"] = base_url

    gateway = create_gateway(config)
    refresh_calls = 0

    async def count_refresh(request: httpx.Request) -> None:
        nonlocal refresh_calls
        if request.url.path == gateway.refresh_path:
            refresh_calls += 1

    gateway.client.event_hooks["request"].append(count_refresh)

    async with gateway.client:
        login = await gateway.client.post(
            LOGIN_API_PATH, json={"email": email, "sub": f"local:{email}"}
        )
        if login.status_code != 200:
            logger.error(f"Login failed: {login.status_code} {login.text}")
            return False
        logger.info(f"Logged in as {email}")

        me = await gateway.send(ME_PATH)
        logger.info(f"{ME_PATH} → {me.status_code}")

        gateway.client.cookies.delete(ACCESS_TOKEN_COOKIE)
        logger.info(f"Dropped access cookie, sending {concurrency} concurrent requests")

        try:
            responses = await asyncio.gather(
                *(gateway.send(ME_PATH) for _ in range(concurrency))
            )
        except GatewayError as e:
            logger.error(f"Gateway error: {e}")
            return False

    statuses = [r.status_code for r in responses]
    logger.info(f"Statuses: {statuses}, refresh calls: {refresh_calls}")
    if refresh_calls > 1:
        # 401이 refresh 완료 이후에 도착한 요청은 새 refresh를 시작함
        logger.warning("More than one refresh: some 401s arrived after the first refresh settled")
    return all(s == 200 for s in statuses)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="gateway refresh 흐름 점검",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="서버 URL (기본: default.yaml의 client.base_url)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=3,
        help="동시 요청 수",
    )
    parser.add_argument(
        "--email",
        type=str,
        default="dev@example.com",
        help="mock 로그인 이메일",
    )
    args = parser.parse_args()

    passed = asyncio.run(check_session(args.base_url, args.concurrency, args.email))
    if passed:
        logger.info("PASS")
        return 0
    logger.error("FAIL")
    return 1


if __name__ == "__main__":
    sys.exit(main())
