"""Request port definitions (DTOs)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "FORM_BODY_KEY",
    "HttpMethod",
    "MapBody",
    "RawBody",
    "RequestBody",
    "RequestSpec",
    "TlsMaterial",
]

# Reserved MapBody key holding pre-encoded form text
FORM_BODY_KEY = "body"


class HttpMethod(str, Enum):
    """HTTP methods accepted by the request builder."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


@dataclass(slots=True, frozen=True)
class RawBody:
    """Request body sent byte-for-byte as given.

    Attributes:
        content: Pre-encoded payload (JSON text, form text, anything).
    """

    content: str

    def is_empty(self) -> bool:
        return not self.content


@dataclass(slots=True, frozen=True)
class MapBody:
    """Legacy key/value request body.

    Serialized as a flat JSON object, or, for form content types, reduced to
    the raw text stored under FORM_BODY_KEY.

    Attributes:
        fields: String keys to string values.
    """

    fields: dict[str, str]

    def is_empty(self) -> bool:
        return not self.fields


RequestBody = RawBody | MapBody


@dataclass(slots=True, frozen=True)
class TlsMaterial:
    """PEM content and TLS switches for one request.

    All certificate/key values are PEM text, never file paths.

    Attributes:
        ca: Trust anchors for server verification (may hold several certs).
        client_crt: Client certificate for mutual TLS.
        client_key: Private key matching client_crt.
        sni: Server name to send and verify instead of the URL host.
        insecure_skip_verify: Disable server certificate verification.
    """

    ca: str | None = None
    client_crt: str | None = None
    client_key: str | None = None
    sni: str | None = None
    insecure_skip_verify: bool = False

    def is_empty(self) -> bool:
        return not (
            self.ca or self.client_crt or self.client_key or self.sni or self.insecure_skip_verify
        )


@dataclass(slots=True, frozen=True)
class RequestSpec:
    """Everything needed to perform one HTTP round trip.

    Attributes:
        url: Absolute http(s) URL.
        method: Explicit HTTP method; None lets the builder pick a default.
        headers: Request headers, one value per name.
        body: Optional request body variant.
        tls: Optional TLS material.
        timeout_ms: Optional deadline for the whole exchange, in milliseconds.
    """

    url: str
    method: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: RequestBody | None = None
    tls: TlsMaterial | None = None
    timeout_ms: int | None = None

    def has_body(self) -> bool:
        return self.body is not None and not self.body.is_empty()
