"""Client TLS configuration built from PEM material."""

from __future__ import annotations

import logging
import ssl
import tempfile
from pathlib import Path

from http_full.ports.errors import ConfigurationError
from http_full.ports.request import TlsMaterial
from http_full.ports.transport import TlsConfig

__all__ = ["build_tls_config"]

logger = logging.getLogger(__name__)


def build_tls_config(material: TlsMaterial | None = None) -> TlsConfig:
    """Build a client TLS configuration.

    Without material, the context verifies servers against the system trust
    store.

    Args:
        material: Optional CA, client pair, SNI and skip-verify switch.

    Returns:
        A fresh TlsConfig owned by the caller.

    Raises:
        ConfigurationError: If the PEM material is malformed or the client
            certificate/key pair is incomplete.
    """
    ssl_context = ssl.create_default_context()
    if material is None:
        return TlsConfig(ssl_context=ssl_context)

    if material.ca:
        _load_ca(ssl_context, material.ca)

    if bool(material.client_crt) != bool(material.client_key):
        raise ConfigurationError(
            "Both client_crt and client_key must be specified", field="client_crt"
        )
    if material.client_crt and material.client_key:
        _load_client_pair(ssl_context, material.client_crt, material.client_key)

    if material.insecure_skip_verify:
        logger.warning("TLS server certificate verification is disabled")
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE

    return TlsConfig(ssl_context=ssl_context, server_hostname=material.sni or None)


def _load_ca(ssl_context: ssl.SSLContext, ca: str) -> None:
    try:
        ssl_context.load_verify_locations(cadata=ca)
    except (ssl.SSLError, ValueError) as e:
        raise ConfigurationError(f"Error loading ca: {e}", field="ca") from e


def _load_client_pair(ssl_context: ssl.SSLContext, client_crt: str, client_key: str) -> None:
    """Load a PEM certificate/key pair into the context.

    The ssl module only reads key pairs from disk, so both PEM blocks are
    staged in a private temporary directory removed on return.
    """
    with tempfile.TemporaryDirectory(prefix="http-full-") as tmp:
        crt_path = Path(tmp) / "client.crt"
        key_path = Path(tmp) / "client.key"
        crt_path.write_text(client_crt)
        key_path.touch(mode=0o600)
        key_path.write_text(client_key)
        try:
            ssl_context.load_cert_chain(certfile=crt_path, keyfile=key_path)
        except (ssl.SSLError, ValueError) as e:
            raise ConfigurationError(
                f"Error loading client certificates: {e}", field="client_crt"
            ) from e
    logger.debug("Loaded client certificate pair for mutual TLS")
