"""Response port definitions (DTOs)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = ["ContentTypeWarning", "RawResponse", "ResponseResult"]


@dataclass(slots=True, frozen=True)
class ContentTypeWarning:
    """Non-fatal diagnostic attached to a result.

    Attributes:
        summary: One-line description.
        detail: Guidance for the consumer.
    """

    summary: str
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.summary}. {self.detail}" if self.detail else self.summary


@dataclass(slots=True, frozen=True)
class RawResponse:
    """Response exactly as received by the transport.

    Attributes:
        status: HTTP status code.
        body: Payload bytes; None when the payload could not be read.
        headers: (name, value) pairs in receipt order, duplicates preserved.
    """

    status: int
    body: bytes | None
    headers: list[tuple[str, str]] = field(default_factory=list)

    def header(self, name: str) -> str | None:
        """Return the first value of a header (case-insensitive), if any."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None


@dataclass(slots=True, frozen=True)
class ResponseResult:
    """Classified outcome of one invocation.

    Attributes:
        id: Identity key for the consumer (the request URL).
        status_code: HTTP status code.
        body: Payload decoded as text.
        headers: Header name to single value, repeated headers joined by ", ".
        warnings: Non-fatal diagnostics.
    """

    id: str
    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)
    warnings: tuple[ContentTypeWarning, ...] = ()

    def as_outputs(self) -> dict[str, Any]:
        """Return the attribute map exposed to the configuration consumer.

        `body` and `response_body` carry identical content.
        """
        return {
            "id": self.id,
            "status_code": self.status_code,
            "body": self.body,
            "response_body": self.body,
            "response_headers": dict(self.headers),
        }
