"""Configuration loading from environment variables and files."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator, model_validator

from http_full.ports.request import HttpMethod, MapBody, RawBody, RequestSpec, TlsMaterial

__all__ = ["Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)


class Settings(BaseModel):
    """Attributes of one HTTP data source invocation.

    Certificates and keys are referenced by path here; to_request_spec()
    reads them so the core only ever sees PEM content.

    Attributes:
        url: Target http(s) URL.
        method: Optional explicit HTTP method.
        request_headers: Headers to send.
        request_body: Raw request body.
        request_body_map: Legacy key/value request body.
        ca_file: PEM file with trusted CA certificates.
        client_crt_file: PEM file with the client certificate.
        client_key_file: PEM file with the client private key.
        sni: Server name override for TLS.
        insecure_skip_verify: Disable server certificate verification.
        request_timeout_ms: Deadline for the request in milliseconds.
    """

    url: str = Field(..., description="URL to request.")
    method: str | None = Field(default=None, description="HTTP method; defaults from body presence.")
    request_headers: dict[str, str] = Field(default_factory=dict)
    request_body: str | None = Field(default=None, description="Pre-encoded request body.")
    request_body_map: dict[str, str] | None = Field(
        default=None,
        description="Legacy key/value body; exclusive with request_body.",
    )
    ca_file: str | None = None
    client_crt_file: str | None = None
    client_key_file: str | None = None
    sni: str | None = None
    insecure_skip_verify: bool = False
    request_timeout_ms: int | None = Field(default=None, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that the URL is a valid HTTP(S) URL.

        Args:
            v: URL to validate.

        Returns:
            The validated URL.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        try:
            url = _http_url_adapter.validate_python(v)
            if url.scheme not in ("http", "https"):
                raise ValueError("Only http:// and https:// URLs allowed")
        except Exception as e:
            raise ValueError(f"Invalid URL: {e}") from e
        return v

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if v not in HttpMethod.__members__:
            allowed = ", ".join(HttpMethod.__members__)
            raise ValueError(f"Unsupported HTTP method {v!r}; expected one of: {allowed}")
        return v

    @model_validator(mode="after")
    def validate_combinations(self) -> "Settings":
        """Check attributes that constrain each other.

        Raises:
            ValueError: If both body forms are set, or only half of the
                client certificate pair is.
        """
        if self.request_body is not None and self.request_body_map is not None:
            raise ValueError("request_body and request_body_map are mutually exclusive")
        if bool(self.client_crt_file) != bool(self.client_key_file):
            raise ValueError("Both client_crt and client_key must be specified")
        return self

    def to_request_spec(self) -> RequestSpec:
        """Read referenced PEM files and build the core request input.

        Returns:
            RequestSpec carrying PEM content, not paths.

        Raises:
            ValueError: If a referenced PEM file cannot be read.
        """
        body: RawBody | MapBody | None = None
        if self.request_body is not None:
            body = RawBody(self.request_body)
        elif self.request_body_map is not None:
            body = MapBody(dict(self.request_body_map))

        tls = TlsMaterial(
            ca=_read_pem(self.ca_file, "ca"),
            client_crt=_read_pem(self.client_crt_file, "client_crt"),
            client_key=_read_pem(self.client_key_file, "client_key"),
            sni=self.sni,
            insecure_skip_verify=self.insecure_skip_verify,
        )

        return RequestSpec(
            url=self.url,
            method=self.method,
            headers=dict(self.request_headers),
            body=body,
            tls=None if tls.is_empty() else tls,
            timeout_ms=self.request_timeout_ms,
        )


def _read_pem(path: str | None, name: str) -> str | None:
    if not path:
        return None
    try:
        return Path(path).read_text()
    except FileNotFoundError as e:
        raise ValueError(f"{name} file not found: {path}") from e
    except OSError as e:
        raise ValueError(f"{name} file could not be read: {path}: {e}") from e


def _json_object_env(name: str) -> dict[str, Any] | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{name} contains invalid JSON") from e
    if not isinstance(data, dict):
        raise ValueError(f"{name} must be a JSON object")
    return data


def _bool_env(name: str) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw in ("", "0", "false", "no"):
        return False
    if raw in ("1", "true", "yes"):
        return True
    raise RuntimeError(f"{name} must be a boolean (got: {raw})")


def load_settings() -> Settings:
    """Load and validate settings from environment.

    Required environment variables:
    - HTTP_URL: http(s) URL to request.

    Optional:
    - HTTP_METHOD: GET, POST, PUT, PATCH, DELETE or HEAD.
    - HTTP_REQUEST_HEADERS: JSON object of header names to values.
    - HTTP_REQUEST_BODY: raw request body.
    - HTTP_REQUEST_BODY_MAP: JSON object (legacy body form).
    - HTTP_CA_FILE, HTTP_CLIENT_CRT_FILE, HTTP_CLIENT_KEY_FILE: PEM paths.
    - HTTP_SNI: TLS server name override.
    - HTTP_INSECURE_SKIP_VERIFY: true/false.
    - HTTP_REQUEST_TIMEOUT_MS: positive integer.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or malformed.
        ValueError: If configuration is invalid.
    """
    try:
        url = os.environ["HTTP_URL"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    timeout_raw = os.getenv("HTTP_REQUEST_TIMEOUT_MS")
    timeout_ms: int | None = None
    if timeout_raw:
        try:
            timeout_ms = int(timeout_raw)
            if timeout_ms <= 0:
                raise ValueError("Must be positive")
        except ValueError as e:
            raise RuntimeError(
                f"HTTP_REQUEST_TIMEOUT_MS must be a positive integer (got: {timeout_raw})"
            ) from e

    settings = Settings(
        url=url,
        method=os.getenv("HTTP_METHOD") or None,
        request_headers=_json_object_env("HTTP_REQUEST_HEADERS") or {},
        request_body=os.getenv("HTTP_REQUEST_BODY"),
        request_body_map=_json_object_env("HTTP_REQUEST_BODY_MAP"),
        ca_file=os.getenv("HTTP_CA_FILE") or None,
        client_crt_file=os.getenv("HTTP_CLIENT_CRT_FILE") or None,
        client_key_file=os.getenv("HTTP_CLIENT_KEY_FILE") or None,
        sni=os.getenv("HTTP_SNI") or None,
        insecure_skip_verify=_bool_env("HTTP_INSECURE_SKIP_VERIFY"),
        request_timeout_ms=timeout_ms,
    )

    logger.info(
        f"HTTP data source configured: url={settings.url}, "
        f"method={settings.method or '<default>'}, "
        f"headers={len(settings.request_headers)}, "
        f"mtls={'on' if settings.client_crt_file else 'off'}, "
        f"timeout={settings.request_timeout_ms or '<none>'}"
    )

    return settings
