"""
Custom Exceptions.

Exception classes raised by the CAM client for consistent error handling.
Transport-level failures are not wrapped: they surface as httpx.TransportError.
"""


class CamError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigurationError(CamError):
    """Raised when the client is used or configured incorrectly."""

    def __init__(self, message: str = "Invalid client configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class APIError(CamError):
    """Raised when the CAM service answers with a non-success status."""

    def __init__(self, status_code: int, message: str | None = None, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.detail = message
        if message:
            text = f"{message} (status: {status_code})"
        else:
            text = f"{status_code} {reason}".strip()
        super().__init__(text, code="API_ERROR")


class DecodeError(CamError):
    """Raised when a successful response cannot be decoded."""

    def __init__(self, message: str = "Failed to decode response") -> None:
        super().__init__(message, code="DECODE_ERROR")


class TokenError(CamError):
    """Raised when a bearer token is missing, malformed or fails verification."""

    def __init__(self, message: str = "Invalid CAM token") -> None:
        super().__init__(message, code="AUTH_INVALID_TOKEN")


class RequestCancelledError(CamError):
    """Raised when the client's cancellation context has been signalled."""

    def __init__(self, message: str = "Request cancelled") -> None:
        super().__init__(message, code="REQ_CANCELLED")
