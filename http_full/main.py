"""Application entrypoint."""

import asyncio
import json
import logging
import sys

from http_full.adapters.driven.config.settings import load_settings
from http_full.adapters.driven.http.client import HttpClient
from http_full.adapters.driven.logging.logging_config import configure_logs
from http_full.core.invocation import read_data_source
from http_full.ports.errors import (
    ConfigurationError,
    RequestTimeoutError,
    ResponseStatusError,
    TransportError,
)

__all__ = ["main"]

logger = logging.getLogger(__name__)


async def main() -> int:
    """Run the HTTP data source once.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration (PEM files are read here).
    3. Perform one request.
    4. Write the outputs as JSON to stdout.

    Returns:
        0 on success, 1 on any configuration, transport or status error.
    """
    configure_logs()
    logger.info("Starting HTTP data source...")

    try:
        spec = load_settings().to_request_spec()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            f"Configuration error: {exc}\n"
            "Hint: check HTTP_URL, HTTP_METHOD, HTTP_REQUEST_HEADERS and that the "
            "referenced CA/client certificate files exist."
        )
        return 1

    try:
        result = await read_data_source(spec, transport_factory=HttpClient)
    except ConfigurationError as exc:
        logger.error(f"Invalid request attribute {exc.field or ''}: {exc}")
        return 1
    except RequestTimeoutError as exc:
        logger.error(f"Request timed out: {exc}")
        return 1
    except TransportError as exc:
        logger.error(f"Transport error: {exc}")
        return 1
    except ResponseStatusError as exc:
        logger.error(str(exc))
        return 1

    sys.stdout.write(json.dumps(result.as_outputs(), indent=2) + "\n")
    logger.info(f"HTTP data source read {spec.url} (status {result.status_code})")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")
        raise SystemExit(130) from None
