"""HTTP client adapter performing one request per session."""

import asyncio
import logging
import ssl
from types import TracebackType
from typing import Any

import aiohttp
from aiohttp import ClientResponse, ClientTimeout

from http_full.core.response_classifier import is_success_status
from http_full.core.tls import build_tls_config
from http_full.ports.errors import RequestTimeoutError, TlsVerificationError, TransportError
from http_full.ports.response import RawResponse
from http_full.ports.transport import PreparedRequest, TlsConfig

__all__ = ["HttpClient"]

logger = logging.getLogger(__name__)


class HttpClient:
    """HTTP client scoped to a single invocation.

    Features:
    - Own connector and TLS context; nothing is shared between instances.
    - No keep-alive: the connection is closed after the response.
    - Deadline covering connect, send and body read.
    - Context manager for proper resource cleanup.
    """

    def __init__(self, tls: TlsConfig | None = None, timeout_ms: int | None = None) -> None:
        """Initialize HTTP client.

        Args:
            tls: TLS configuration; defaults to system trust-store verification.
            timeout_ms: Optional deadline for the whole exchange in milliseconds.
        """
        self.tls = tls or build_tls_config()
        self.timeout_ms = timeout_ms
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        connector = aiohttp.TCPConnector(ssl=self.tls.ssl_context, force_close=True)
        kwargs: dict[str, Any] = {"connector": connector}
        if self.timeout_ms is not None:
            kwargs["timeout"] = ClientTimeout(total=self.timeout_ms / 1000)
        self.session = aiohttp.ClientSession(**kwargs)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session and connector).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()
            self.session = None

    async def send(self, req: PreparedRequest) -> RawResponse:
        """Send one HTTP request and read the whole response.

        Args:
            req: Prepared request (method, URL, headers, payload).

        Returns:
            Raw response with status, payload and header pairs.

        Raises:
            RuntimeError: If session not initialized.
            RequestTimeoutError: If the deadline elapsed.
            TlsVerificationError: If the server certificate was rejected.
            TransportError: For any other network or TLS failure.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        kwargs: dict[str, Any] = {
            "headers": req.headers,
            "data": req.data,
            "ssl": self.tls.ssl_context,
        }
        if self.tls.server_hostname:
            kwargs["server_hostname"] = self.tls.server_hostname

        logger.info(f"Sending {req.method} {req.url}")
        try:
            async with self.session.request(req.method, req.url, **kwargs) as resp:
                payload = await self._read_body(resp)
                logger.info(f"{req.method} {req.url} returned status {resp.status}")
                return RawResponse(
                    status=resp.status,
                    body=payload,
                    headers=list(resp.headers.items()),
                )
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(
                f"Error making request: deadline exceeded after {self.timeout_ms} ms"
            ) from e
        except aiohttp.ClientConnectorCertificateError as e:
            raise TlsVerificationError(f"Error making request: {e}") from e
        except (aiohttp.ClientError, ssl.SSLError, OSError) as e:
            raise TransportError(f"Error making request: {e}") from e

    async def _read_body(self, resp: ClientResponse) -> bytes | None:
        """Read the response payload.

        A failed read of an error response yields None so the status can
        still be reported; on a 2xx response the failure propagates.
        """
        try:
            return await resp.read()
        except aiohttp.ClientPayloadError as e:
            if is_success_status(resp.status):
                raise
            logger.debug(f"Could not read error response body: {e}")
            return None
