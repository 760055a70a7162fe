"""Domain layer: errors, constants and schemas."""

from .errors import (
    ConfigError,
    ErrorCodes,
    FetchError,
    GatewayError,
    HttpError,
    RefreshFailed,
    TransportError,
)
from .schemas import (
    AccessClaims,
    IssuedSession,
    RefreshState,
    RefreshTokenRecord,
    User,
)

__all__ = [
    "GatewayError",
    "TransportError",
    "RefreshFailed",
    "FetchError",
    "HttpError",
    "ConfigError",
    "ErrorCodes",
    "RefreshState",
    "User",
    "RefreshTokenRecord",
    "AccessClaims",
    "IssuedSession",
]
