"""Response classification: status acceptance, text safety, header joining."""

from __future__ import annotations

import codecs
import re
from collections.abc import Iterable

from http_full.ports.errors import ResponseStatusError
from http_full.ports.response import ContentTypeWarning, RawResponse, ResponseResult

__all__ = [
    "TOKEN_PATTERN",
    "check_status",
    "classify",
    "content_type_warnings",
    "decode_body",
    "is_content_type_text",
    "is_success_status",
    "join_headers",
    "parse_media_type",
]

# RFC 7230 token, shared by media types and header names
TOKEN_PATTERN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"^({TOKEN_PATTERN})/({TOKEN_PATTERN})$")
_PARAM_NAME_RE = re.compile(rf"^{TOKEN_PATTERN}$")

# Media types that are safe to expose as text
_TEXT_MEDIA_TYPES = (
    re.compile(r"^text/.+$"),
    re.compile(r"^application/json$"),
    re.compile(r"^application/samlmetadata\+xml$"),
)
_TEXT_CHARSETS = ("", "utf-8", "us-ascii")

BINARY_CONTENT_DETAIL = (
    "If the content is binary data, the consumer may not properly handle "
    "the contents of the response."
)


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def check_status(status: int, body: str | None) -> None:
    """Raise unless the status is in [200, 300).

    Args:
        status: HTTP status code.
        body: Response body text, or None when it could not be read.

    Raises:
        ResponseStatusError: For any non-2xx status, carrying the body text.
    """
    if not is_success_status(status):
        raise ResponseStatusError(status, body)


def parse_media_type(value: str) -> tuple[str, dict[str, str]] | None:
    """Parse a Content-Type value into a lowercase media type and parameters.

    Returns None when the value is malformed.

    Example:
        >>> parse_media_type('text/plain; charset="UTF-8"')
        ('text/plain', {'charset': 'UTF-8'})
    """
    media, _, rest = value.partition(";")
    match = _MEDIA_TYPE_RE.match(media.strip())
    if match is None:
        return None

    parts = _split_params(rest)
    if parts is None:
        return None

    params: dict[str, str] = {}
    for part in parts:
        part = part.strip()
        if not part:
            continue
        name, sep, param_value = part.partition("=")
        name = name.strip()
        if not sep or not _PARAM_NAME_RE.match(name):
            return None
        param_value = param_value.strip()
        if param_value.startswith('"'):
            param_value = _unquote(param_value)
            if param_value is None:
                return None
        params[name.lower()] = param_value

    return f"{match.group(1)}/{match.group(2)}".lower(), params


def _split_params(rest: str) -> list[str] | None:
    """Split a parameter list on semicolons outside quoted-strings.

    Returns None when a quoted-string is left open.
    """
    parts: list[str] = []
    current: list[str] = []
    quoted = escaped = False
    for char in rest:
        if escaped:
            escaped = False
        elif quoted and char == "\\":
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == ";" and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if quoted:
        return None
    parts.append("".join(current))
    return parts


def _unquote(value: str) -> str | None:
    # quoted-string: DQUOTE *( qdtext / quoted-pair ) DQUOTE
    if len(value) < 2 or not value.endswith('"'):
        return None
    out: list[str] = []
    chars = iter(value[1:-1])
    for char in chars:
        if char == "\\":
            char = next(chars, "")
        elif char == '"':
            return None
        out.append(char)
    return "".join(out)


def is_content_type_text(content_type: str | None) -> bool:
    """Tell whether a Content-Type is safe to handle as text.

    Safe means text/*, application/json or application/samlmetadata+xml with
    no charset, utf-8 or us-ascii.
    """
    if not content_type:
        return False
    parsed = parse_media_type(content_type)
    if parsed is None:
        return False

    media_type, params = parsed
    for pattern in _TEXT_MEDIA_TYPES:
        if pattern.match(media_type):
            return params.get("charset", "").lower() in _TEXT_CHARSETS
    return False


def content_type_warnings(content_type: str | None) -> list[ContentTypeWarning]:
    if is_content_type_text(content_type):
        return []
    return [
        ContentTypeWarning(
            summary=(
                "Content-Type is not recognized as a text type, "
                f'got "{content_type or ""}"'
            ),
            detail=BINARY_CONTENT_DETAIL,
        )
    ]


def join_headers(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse repeated headers into one value per name (RFC 2616 section 4.2).

    Values are joined with ", " in receipt order. Names match
    case-insensitively and keep the casing seen first.
    """
    names: dict[str, str] = {}
    values: dict[str, list[str]] = {}
    for name, value in pairs:
        key = name.lower()
        names.setdefault(key, name)
        values.setdefault(key, []).append(value)
    return {names[key]: ", ".join(joined) for key, joined in values.items()}


def decode_body(payload: bytes | None, content_type: str | None) -> str:
    """Decode a payload using its declared charset, falling back to UTF-8."""
    if not payload:
        return ""

    encoding = "utf-8"
    parsed = parse_media_type(content_type) if content_type else None
    if parsed is not None:
        charset = parsed[1].get("charset")
        if charset:
            try:
                encoding = codecs.lookup(charset).name
            except LookupError:
                # Unknown charset: keep utf-8
                pass
    return payload.decode(encoding, errors="replace")


def classify(raw: RawResponse, identity: str) -> ResponseResult:
    """Turn a raw response into a ResponseResult.

    Args:
        raw: Response as received by the transport.
        identity: Identity key for the result (the request URL).

    Raises:
        ResponseStatusError: If the status is not 2xx.
    """
    content_type = raw.header("Content-Type")
    body = decode_body(raw.body, content_type) if raw.body is not None else None

    check_status(raw.status, body)

    return ResponseResult(
        id=identity,
        status_code=raw.status,
        body=body or "",
        headers=join_headers(raw.headers),
        warnings=tuple(content_type_warnings(content_type)),
    )
