"""
Base exception classes for the HeartBridge client.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling at the flow and screen boundaries.
"""

from typing import Optional, Any


class HeartBridgeError(Exception):
    """
    Base exception for all HeartBridge errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(HeartBridgeError):
    """Input validation failed."""

    pass


class PersistenceError(HeartBridgeError):
    """
    A local store operation failed.

    Raised by the credential store (OS keychain) and the profile store.
    """

    def __init__(self, message: str, store: str, code: Optional[str] = None):
        super().__init__(message, code=code or "PERSISTENCE_ERROR", details={"store": store})
        self.store = store


class APIError(HeartBridgeError):
    """Base class for every failure raised by the API client."""

    pass


class InvalidURLError(APIError):
    """The request path could not be resolved against the base URL."""

    def __init__(self, path: str = ""):
        super().__init__("Invalid URL.", code="INVALID_URL", details={"path": path})


class InvalidResponseError(APIError):
    """The transport did not produce a well-formed HTTP response."""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            "Invalid server response.",
            code="INVALID_RESPONSE",
            details={"reason": reason} if reason else {},
        )


class ServerError(APIError):
    """
    The server answered with a status outside 200-299.

    The message is the server's ``error`` text when the body carries one,
    otherwise a templated ``Server error (<status>)`` string.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message,
            code="SERVER_ERROR",
            details={"status_code": status_code} if status_code is not None else {},
        )
        self.status_code = status_code


class DecodingError(APIError):
    """The response body did not match the expected shape."""

    def __init__(self, reason: str):
        super().__init__(
            f"Failed to decode response: {reason}",
            code="DECODING_ERROR",
            details={"reason": reason},
        )
        self.reason = reason
