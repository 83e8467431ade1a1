"""Per-request overrides for the SOLUS IO client."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping, Sequence


@dataclass(frozen=True)
class RequestOptions:
    query: Mapping[str, str | int | Sequence[str | int]] | None = None
    json: object | None = None
    headers: Mapping[str, str] | None = None
    timeout: float | None = None


def with_query(options: RequestOptions | None, query: Mapping[str, object] | None) -> RequestOptions:
    """Return ``options`` with ``query`` merged under its own query values."""
    options = options or RequestOptions()
    if not query:
        return options
    merged: dict[str, object] = dict(query)
    if options.query:
        merged.update(options.query)
    return replace(options, query=merged)


def with_body(options: RequestOptions | None, body: object | None) -> RequestOptions:
    options = options or RequestOptions()
    if body is None or options.json is not None:
        return options
    return replace(options, json=body)
