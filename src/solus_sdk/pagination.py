"""Cursor over paginated list responses."""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar

from pydantic import BaseModel, TypeAdapter

from .context import Context, ensure_context
from .exceptions import SolusError
from .models import ResponseLinks, ResponseMeta

T = TypeVar("T", bound=BaseModel)

Page = tuple[ResponseLinks, ResponseMeta, list[Any]]
PageFetcher = Callable[[str, Context], Page]


def parse_page(payload: Mapping[str, Any], item_model: type[T]) -> tuple[ResponseLinks, ResponseMeta, list[T]]:
    links = ResponseLinks.model_validate(payload.get("links") or {})
    meta = ResponseMeta.model_validate(payload.get("meta") or {})
    items = TypeAdapter(list[item_model]).validate_python(payload.get("data") or [])
    return links, meta, items


class PaginatedResponse(Generic[T]):
    """One fetched page of a list operation plus the means to fetch the rest.

    ``next_page`` follows the server-supplied ``next`` link and appends the
    new items to ``data``. The cursor only moves forward and cannot be
    restarted. It has no locking, so only one caller may advance it at a
    time. ``data`` is a private copy: lists handed to the constructor are
    never mutated.
    """

    def __init__(
        self,
        *,
        links: ResponseLinks,
        meta: ResponseMeta,
        data: list[T],
        fetch_page: PageFetcher,
    ) -> None:
        self.links = links
        self.meta = meta
        self.data: list[T] = list(data)
        self.err: SolusError | None = None
        self._fetch_page = fetch_page

    @property
    def has_next(self) -> bool:
        if self.err is not None:
            return False
        if self.meta.current_page == self.meta.last_page:
            return False
        return bool(self.links.next)

    def next_page(self, ctx: Context | None = None) -> bool:
        """Fetch the next page and append its items.

        Returns ``False`` at the end of the list, on an empty page, or when
        the fetch fails; in the last case the error is kept in ``err``.
        """
        link = self.links.next
        if not self.has_next or not link:
            return False
        try:
            links, meta, items = self._fetch_page(link, ensure_context(ctx))
        except SolusError as exc:
            self.err = exc
            return False

        self.links = links
        self.meta = meta
        if not items:
            return False
        self.data.extend(items)
        return True

    def drain(self, ctx: Context | None = None) -> list[T]:
        """Fetch every remaining page and return all items.

        Raises the stored fetch error, if any, once no more pages can be read.
        """
        while self.next_page(ctx):
            pass
        if self.err is not None:
            raise self.err
        return list(self.data)

    def iter_items(self, ctx: Context | None = None) -> Iterator[T]:
        """Yield items lazily, fetching further pages only when needed."""
        index = 0
        while True:
            while index < len(self.data):
                yield self.data[index]
                index += 1
            if not self.next_page(ctx):
                break
        if self.err is not None:
            raise self.err

    def __iter__(self) -> Iterator[T]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"PaginatedResponse(items={len(self.data)}, "
            f"page={self.meta.current_page}/{self.meta.last_page}, total={self.meta.total})"
        )
