"""
Error definitions for the auth gateway.

규칙:
- 조용한 실패 금지 → 코드가 있는 예외로 명시적 실패
- 클라이언트(gateway) 에러: GatewayError 계열
- 서버(route) 에러: HttpError → route 경계에서 JSON 응답으로 변환
"""

from typing import Any


class GatewayError(Exception):
    """
    Gateway 에러 기본 클래스.

    Usage:
        raise GatewayError("TRANSPORT_ERROR", "connection refused", url=url)
    """

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        if ctx_str:
            return f"[{self.code}] {self.message} ({ctx_str})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class TransportError(GatewayError):
    """하위 transport 호출 실패. 재시도 없이 그대로 전파."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(ErrorCodes.TRANSPORT_ERROR, message, **context)


class RefreshFailed(GatewayError):
    """
    토큰 refresh 실패.

    triggering 호출자에게 전파되고, 로그인 화면으로 이동이 시작됨.
    """

    def __init__(self, message: str = "Refresh failed", status: int | None = None) -> None:
        self.status = status
        super().__init__(ErrorCodes.REFRESH_FAILED, message, status=status)


class FetchError(GatewayError):
    """fetch_json 응답이 2xx가 아님."""

    def __init__(self, status: int, url: str) -> None:
        self.status = status
        self.url = url
        super().__init__(ErrorCodes.FETCH_FAILED, "Failed to fetch", status=status, url=url)


class HttpError(Exception):
    """
    서버 측 HTTP 에러.

    public_message만 응답 본문에 노출됨 (내부 상세는 로그로만).
    """

    def __init__(self, status: int, public_message: str) -> None:
        self.status = status
        self.public_message = public_message
        super().__init__(public_message)


class ConfigError(Exception):
    """
    설정 에러 (env, secret 등 필수 런타임 설정 누락).

    HTTP 에러가 아님. route 경계에서 HTTP로 매핑할 것.
    메시지에 env 이름을 넣지 않음 (민감 정보 노출 방지).
    """

    def __init__(self, missing_env: str | None = None) -> None:
        self.missing_env = missing_env
        super().__init__("Server misconfigured")


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Client (gateway) ===
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    REFRESH_FAILED = "REFRESH_FAILED"
    FETCH_FAILED = "FETCH_FAILED"
