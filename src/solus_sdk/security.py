"""Security helpers: base URL checks and log redaction."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import urlparse


SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "x-api-key",
}

SENSITIVE_FIELDS = {
    "password",
    "access_token",
    "token",
}

REDACTED = "[REDACTED]"


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = REDACTED
        else:
            redacted[key] = value
    return redacted


def sanitize_payload(payload: Any) -> Any:
    """Return a copy of a JSON-like payload with secret fields redacted."""
    if isinstance(payload, Mapping):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_FIELDS else sanitize_payload(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [sanitize_payload(item) for item in payload]
    return payload


def validate_base_url(url: str, *, allow_http: bool = False) -> None:
    """Validate base URL to avoid scheme abuse and plaintext credentials."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("base_url must include scheme and host")
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported base_url scheme: {parsed.scheme}")
    if parsed.scheme == "http" and not allow_http:
        allowed = {"localhost", "127.0.0.1", "::1"}
        host = (parsed.hostname or "").lower()
        if host not in allowed:
            raise ValueError("Non-HTTPS base_url is not allowed without allow_http=True")
    if "\x00" in url:
        raise ValueError("Invalid base_url")


def same_origin(url: str, base_url: str) -> bool:
    """True when ``url`` points at the same scheme, host and port as ``base_url``."""
    target = urlparse(url)
    base = urlparse(base_url)
    return (target.scheme, target.netloc.lower()) == (base.scheme, base.netloc.lower())
