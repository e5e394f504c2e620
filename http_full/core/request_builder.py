"""Request construction: method defaults, body encoding and headers."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping

from multidict import CIMultiDict
from yarl import URL

from http_full.core.response_classifier import TOKEN_PATTERN
from http_full.ports.errors import ConfigurationError
from http_full.ports.request import (
    FORM_BODY_KEY,
    HttpMethod,
    MapBody,
    RawBody,
    RequestBody,
    RequestSpec,
)
from http_full.ports.transport import PreparedRequest

__all__ = [
    "build_request",
    "content_type_of",
    "encode_body",
    "resolve_method",
]

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"
_ALLOWED_SCHEMES = ("http", "https")
_HEADER_NAME_RE = re.compile(TOKEN_PATTERN)


def resolve_method(method: str | None, has_body: bool) -> str:
    """Pick the HTTP method for a request.

    An explicit method always wins; otherwise POST when a body is present,
    GET when not.

    Raises:
        ConfigurationError: If the explicit method is not supported.
    """
    if method is None or method == "":
        return HttpMethod.POST.value if has_body else HttpMethod.GET.value
    try:
        return HttpMethod(method).value
    except ValueError as e:
        allowed = ", ".join(m.value for m in HttpMethod)
        raise ConfigurationError(
            f"Unsupported HTTP method {method!r}; expected one of: {allowed}", field="method"
        ) from e


def content_type_of(headers: Mapping[str, str]) -> str | None:
    """Return the request content type, matching the header name case-insensitively."""
    content_type = None
    for name, value in headers.items():
        if name.lower() == "content-type":
            content_type = value
    return content_type


def encode_body(body: RequestBody | None, content_type: str | None) -> bytes | None:
    """Encode a request body variant into the bytes to send.

    Args:
        body: Raw or legacy map body.
        content_type: Declared request content type, if any.

    Returns:
        Payload bytes, or None when nothing should be sent.

    Raises:
        ConfigurationError: If a map body cannot be encoded as JSON.
    """
    if body is None or body.is_empty():
        return None

    if isinstance(body, RawBody):
        return body.content.encode("utf-8")

    if isinstance(body, MapBody):
        if content_type is None:
            return _encode_json(body)
        lowered = content_type.lower()
        if FORM_CONTENT_TYPE in lowered:
            return body.fields.get(FORM_BODY_KEY, "").encode("utf-8")
        if JSON_CONTENT_TYPE in lowered:
            return _encode_json(body)
        logger.warning(
            f"Map request body is not encoded for content type {content_type!r}; "
            "no payload will be sent"
        )
        return None

    raise ConfigurationError(
        f"Unsupported request body type: {type(body).__name__}", field="request_body"
    )


def _encode_json(body: MapBody) -> bytes:
    try:
        return json.dumps(body.fields, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Error marshalling JSON request: {e}", field="request_body"
        ) from e


def _build_headers(headers: Mapping[str, str]) -> CIMultiDict[str]:
    prepared: CIMultiDict[str] = CIMultiDict()
    for name, value in headers.items():
        if not _HEADER_NAME_RE.fullmatch(name):
            raise ConfigurationError(
                f"Invalid header field name {name!r}", field="request_headers"
            )
        # Control characters other than HTAB would corrupt the request framing
        if any((ord(c) < 0x20 and c != "\t") or c == "\x7f" for c in value):
            raise ConfigurationError(
                f"Invalid header field value for {name!r}", field="request_headers"
            )
        # One value per name, last write wins
        prepared[name] = value
    return prepared


def _validate_url(url: str) -> str:
    try:
        parsed = URL(url)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid url {url!r}: {e}", field="url") from e
    if not parsed.is_absolute() or parsed.scheme not in _ALLOWED_SCHEMES or not parsed.host:
        raise ConfigurationError(
            f"Invalid url {url!r}: expected an absolute http:// or https:// URL", field="url"
        )
    return url


def build_request(spec: RequestSpec) -> PreparedRequest:
    """Turn a RequestSpec into a PreparedRequest without touching the network.

    Raises:
        ConfigurationError: If the URL, method, headers, body or timeout are
            invalid.
    """
    if spec.timeout_ms is not None and spec.timeout_ms <= 0:
        raise ConfigurationError(
            f"Request timeout must be a positive number of milliseconds, got {spec.timeout_ms}",
            field="request_timeout_ms",
        )
    url = _validate_url(spec.url)
    method = resolve_method(spec.method, spec.has_body())
    headers = _build_headers(spec.headers)
    data = encode_body(spec.body, content_type_of(spec.headers))

    logger.debug(
        f"Prepared {method} {url} "
        f"(headers={len(headers)}, body={len(data) if data is not None else 0} bytes)"
    )
    return PreparedRequest(method=method, url=url, headers=headers, data=data)
