"""Transport port definition (interface and the DTOs it consumes)."""

from __future__ import annotations

import ssl
from collections.abc import Callable
from dataclasses import dataclass
from types import TracebackType
from typing import Protocol

from multidict import CIMultiDict

from http_full.ports.response import RawResponse

__all__ = ["PreparedRequest", "TlsConfig", "TransportFactory", "TransportPort"]


@dataclass(slots=True, frozen=True)
class PreparedRequest:
    """Request ready to hand to the transport.

    Attributes:
        method: Resolved HTTP method.
        url: Target URL.
        headers: Headers to send, one value per name.
        data: Encoded payload, or None for no body.
    """

    method: str
    url: str
    headers: CIMultiDict[str]
    data: bytes | None = None


@dataclass(slots=True, frozen=True)
class TlsConfig:
    """TLS settings handed to the transport for a single request.

    Attributes:
        ssl_context: Client context (trust store, client pair, verify mode).
        server_hostname: SNI/verification name overriding the URL host.
    """

    ssl_context: ssl.SSLContext
    server_hostname: str | None = None


class TransportPort(Protocol):
    """Interface for sending one prepared request.

    Implementations own their connections for the lifetime of the async
    context and must release them on exit, whatever the outcome.
    """

    async def __aenter__(self) -> TransportPort: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def send(self, req: PreparedRequest, /) -> RawResponse:
        """Send the request and return the response as received.

        Args:
            req: Prepared request.

        Returns:
            Raw response.
        """
        ...


# Builds a transport from a TLS config and an optional timeout in milliseconds
TransportFactory = Callable[[TlsConfig, int | None], TransportPort]
