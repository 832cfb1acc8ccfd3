"""
JSON-RPC client error hierarchy

Every failure surfaced by a generated stub derives from JsonRpcClientError,
so callers can catch the whole family or pick a single outcome.
"""

from typing import Optional


class JsonRpcClientError(Exception):
    """Base class for all errors raised by the invocation engine."""


class InvalidArgument(JsonRpcClientError, ValueError):
    """Raised when a stub cannot be created from the given arguments."""


class ConfigurationError(JsonRpcClientError):
    """Raised at call time when a method's parameter naming is inconsistent."""


class TransportError(JsonRpcClientError):
    """Raised when the transport fails to deliver a request or return a response."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ProtocolError(JsonRpcClientError):
    """Raised when the response text is not a well-formed JSON-RPC envelope."""


class DecodeError(JsonRpcClientError):
    """Raised when a result cannot be converted into the declared return type."""


class RemoteError(JsonRpcClientError):
    """Application-level error reported by the server

    Attributes:
        code: Error code, when the server sent one
        message: Error message, when the server sent one
        data: Extra error data; nested objects are kept as raw JSON text
    """

    def __init__(self,
                 code: Optional[int] = None,
                 message: Optional[str] = None,
                 data: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        parts = []
        if self.code is not None:
            parts.append(f"code={self.code}")
        if self.message is not None:
            parts.append(f"message={self.message}")
        if self.data is not None:
            parts.append(f"data={self.data}")
        return f"remote error ({', '.join(parts)})" if parts else "remote error"

    def __repr__(self) -> str:
        return f"RemoteError(code={self.code!r}, message={self.message!r}, data={self.data!r})"
