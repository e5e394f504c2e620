"""Single-shot invocation: build, send, classify."""

import logging

from http_full.core.request_builder import build_request
from http_full.core.response_classifier import classify
from http_full.core.tls import build_tls_config
from http_full.ports.request import RequestSpec
from http_full.ports.response import ResponseResult
from http_full.ports.transport import TransportFactory

__all__ = ["read_data_source"]

logger = logging.getLogger(__name__)


async def read_data_source(
    spec: RequestSpec,
    *,
    transport_factory: TransportFactory,
) -> ResponseResult:
    """Perform one HTTP round trip and classify the response.

    Sequence:
    1. Build the request and the TLS configuration (no network I/O yet).
    2. Open a fresh transport, send, read the response, close the transport.
    3. Classify the response; identity is the request URL.

    Args:
        spec: What to request and how.
        transport_factory: Builds the transport for this invocation from the
            TLS config and the timeout in milliseconds.

    Returns:
        Classified response with any non-fatal warnings attached.

    Raises:
        ConfigurationError: Invalid input, raised before any network I/O.
        TransportError: Network, TLS or timeout failure.
        ResponseStatusError: Non-2xx response.

    Notes:
        - No retries: the first failure is final.
        - The identity is the URL alone, so requests to the same URL with
          different methods, headers or bodies share it.
    """
    prepared = build_request(spec)
    tls = build_tls_config(spec.tls)

    async with transport_factory(tls, spec.timeout_ms) as transport:
        raw = await transport.send(prepared)

    result = classify(raw, identity=spec.url)
    for warning in result.warnings:
        logger.warning(f"{spec.url}: {warning}")

    return result
