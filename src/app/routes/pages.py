"""
Page Routes: 로그인 / 책 목록 진입점.

실제 화면 렌더링은 프론트엔드 담당. 여기서는 route guard 대상 경로만 제공.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from src.domain.constants import LOGIN_PATH, POST_LOGIN_PATH

router = APIRouter()


@router.get(LOGIN_PATH, response_class=HTMLResponse)
async def login_page() -> HTMLResponse:
    """로그인 화면."""
    return HTMLResponse(content="""
<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8">
    <title>로그인 - Bookmaker</title>
</head>
<body>
    <h1>로그인</h1>
</body>
</html>
    """)


@router.get(POST_LOGIN_PATH, response_class=HTMLResponse)
async def book_page() -> HTMLResponse:
    """책 목록 화면 (로그인 필요)."""
    return HTMLResponse(content="""
<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8">
    <title>내 책 - Bookmaker</title>
</head>
<body>
    <h1>내 책</h1>
</body>
</html>
    """)
