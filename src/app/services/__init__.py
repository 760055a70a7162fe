"""
Application Services.

역할:
- auth: 세션 발급, refresh token rotation, logout
"""

from .auth import AuthService

__all__ = [
    "AuthService",
]
