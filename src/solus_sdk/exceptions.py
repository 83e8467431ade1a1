"""SDK-specific exceptions."""

from __future__ import annotations

import enum
import json
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ErrorKind(str, enum.Enum):
    TRANSPORT = "transport"
    SERVER = "server"
    CLIENT = "client"
    TASK_FAILED = "task_failed"
    RETRIES_EXHAUSTED = "retries_exhausted"
    CANCELLED = "cancelled"
    INVALID_RESPONSE = "invalid_response"


class SolusError(Exception):
    """Base exception for all SOLUS IO SDK failures.

    A single type is used for every failure; ``kind`` tells them apart.
    HTTP failures additionally carry the request ``method`` and ``path``, the
    response ``status_code`` and the decoded ``errors`` mapping.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        method: str | None = None,
        path: str | None = None,
        status_code: int | None = None,
        errors: Mapping[str, Sequence[str]] | None = None,
        body: bytes | None = None,
        task: object = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.method = method
        self.path = path
        self.status_code = status_code
        self.errors = {key: list(values) for key, values in (errors or {}).items()}
        self.body = body
        self.task = task
        self.cause = cause

    @property
    def is_http_error(self) -> bool:
        return self.status_code is not None and self.method is not None

    def __str__(self) -> str:
        if not self.is_http_error:
            return self.message
        text = f"HTTP {self.method} {self.path} returns {self.status_code} status code"
        if self.errors:
            text += " with errors"
        if self.message:
            text += f": {self.message}"
        if self.errors:
            text += f" ({format_field_errors(self.errors)})"
        return text

    def __repr__(self) -> str:
        return f"SolusError(kind={self.kind.value!r}, message={str(self)!r})"


class _ErrorEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    http_code: int | None = None
    message: str = ""
    errors: dict[str, list[str]] = Field(default_factory=dict)


def _is_server_status(status_code: int) -> bool:
    return status_code == 0 or status_code >= 500


def normalize_http_error(body: bytes, method: str, path: str, status_code: int) -> SolusError:
    """Build a structured error from a non-success response.

    The body is decoded as ``{"http_code", "message", "errors"}`` when
    possible; otherwise the whole body becomes the message. The status code
    always comes from the response, never from the envelope.
    """
    kind = ErrorKind.SERVER if _is_server_status(status_code) else ErrorKind.CLIENT
    text = body.decode("utf-8", errors="replace") if body else ""
    try:
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise ValueError("error envelope must be an object")
        envelope = _ErrorEnvelope.model_validate(payload)
    except (ValueError, ValidationError):
        return SolusError(
            kind,
            text,
            method=method,
            path=path,
            status_code=status_code,
            body=body,
        )
    return SolusError(
        kind,
        envelope.message,
        method=method,
        path=path,
        status_code=status_code,
        errors=envelope.errors,
        body=body,
    )


def format_field_errors(errors: Mapping[str, Sequence[str]]) -> str:
    """Render validation errors as ``key: value`` pairs joined by ``, ``."""
    parts: list[str] = []
    for key, values in errors.items():
        if len(values) == 1:
            parts.append(f"{key}: {values[0]}")
        else:
            parts.append(f"{key}: [{' '.join(values)}]")
    return ", ".join(parts)


def _iter_chain(err: BaseException | None):
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        if isinstance(err, SolusError) and err.cause is not None:
            err = err.cause
        else:
            err = err.__cause__


def is_not_found(err: BaseException | None) -> bool:
    """True when ``err`` is, or wraps, an HTTP error with status code 404."""
    for candidate in _iter_chain(err):
        if isinstance(candidate, SolusError) and candidate.is_http_error:
            return candidate.status_code == 404
    return False
