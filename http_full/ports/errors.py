"""Typed errors raised across the invocation boundary."""

__all__ = [
    "ConfigurationError",
    "HttpFullError",
    "RequestTimeoutError",
    "ResponseStatusError",
    "TlsVerificationError",
    "TransportError",
]


class HttpFullError(Exception):
    """Base class for all invocation errors."""


class ConfigurationError(HttpFullError):
    """Invalid input detected before any network I/O.

    Attributes:
        field: Name of the offending attribute, when known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class TransportError(HttpFullError):
    """DNS, connect, TLS handshake or read failure."""


class RequestTimeoutError(TransportError):
    """The request deadline elapsed before the exchange completed."""


class TlsVerificationError(TransportError):
    """The server certificate was not trusted or did not match the host."""


class ResponseStatusError(HttpFullError):
    """The server answered with a status outside [200, 300).

    Attributes:
        status_code: Status returned by the server.
        body: Response body text, when it could be read.
    """

    def __init__(self, status_code: int, body: str | None = None) -> None:
        message = f"HTTP request error. Response code: {status_code}"
        if body:
            message += f",  Error Response body: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body
