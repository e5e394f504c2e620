"""Offline configuration check for container orchestration."""

import logging

from http_full.adapters.driven.config.settings import load_settings
from http_full.adapters.driven.logging.logging_config import configure_logs
from http_full.core.request_builder import build_request
from http_full.core.tls import build_tls_config
from http_full.ports.errors import ConfigurationError

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Validate the data source configuration without sending anything.

    Validates:
    - Required environment variables are set.
    - Referenced PEM files exist and parse.
    - The request (URL, method, headers, body) can be built.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        spec = load_settings().to_request_spec()
        build_request(spec)
        build_tls_config(spec.tls)
    except (RuntimeError, ValueError, ConfigurationError) as exc:
        logger.error(f"HTTP data source healthcheck FAILED: {exc}")
        return 1

    logger.info("HTTP data source healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
