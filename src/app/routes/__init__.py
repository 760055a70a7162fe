"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (JSON)
"""

from . import auth, pages

__all__ = ["auth", "pages"]
