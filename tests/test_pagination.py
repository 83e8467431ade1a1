from __future__ import annotations

import pytest

from solus_sdk.context import Context
from solus_sdk.exceptions import ErrorKind, SolusError
from solus_sdk.models import Location, ResponseLinks, ResponseMeta
from solus_sdk.pagination import PaginatedResponse, parse_page


def _page(current: int, last: int, ids: list[int]):
    links = ResponseLinks(next=f"https://api.example.com/api/v1/locations?page={current + 1}" if current < last else None)
    meta = ResponseMeta(current_page=current, last_page=last, total=0)
    return links, meta, [Location(id=i, name=f"loc-{i}") for i in ids]


class FakeFetcher:
    def __init__(self, pages) -> None:
        self.pages = list(pages)
        self.links: list[str] = []

    def __call__(self, link: str, ctx: Context):
        self.links.append(link)
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page


def _cursor(first, fetcher) -> PaginatedResponse[Location]:
    links, meta, items = first
    return PaginatedResponse(links=links, meta=meta, data=items, fetch_page=fetcher)


def test_last_page_does_not_fetch() -> None:
    fetcher = FakeFetcher([])
    cursor = _cursor(_page(1, 1, [1, 2]), fetcher)

    assert not cursor.has_next
    assert cursor.next_page() is False
    assert [loc.id for loc in cursor.data] == [1, 2]
    assert fetcher.links == []


def test_next_page_appends_items_and_updates_meta() -> None:
    fetcher = FakeFetcher([_page(2, 3, [3, 4]), _page(3, 3, [5])])
    cursor = _cursor(_page(1, 3, [1, 2]), fetcher)

    assert cursor.next_page() is True
    assert cursor.meta.current_page == 2
    assert cursor.next_page() is True
    assert cursor.next_page() is False

    assert [loc.id for loc in cursor.data] == [1, 2, 3, 4, 5]
    assert fetcher.links == [
        "https://api.example.com/api/v1/locations?page=2",
        "https://api.example.com/api/v1/locations?page=3",
    ]


def test_empty_page_stops_iteration() -> None:
    fetcher = FakeFetcher([_page(2, 3, [])])
    cursor = _cursor(_page(1, 3, [1]), fetcher)

    assert cursor.next_page() is False
    assert cursor.meta.current_page == 2
    assert len(cursor) == 1
    assert cursor.err is None


def test_fetch_error_is_stored_and_ends_iteration() -> None:
    failure = SolusError(ErrorKind.RETRIES_EXHAUSTED, "exceeded retry limit")
    fetcher = FakeFetcher([failure])
    cursor = _cursor(_page(1, 3, [1]), fetcher)

    assert cursor.next_page() is False
    assert cursor.err is failure
    assert not cursor.has_next
    assert cursor.next_page() is False
    assert len(fetcher.links) == 1


def test_drain_collects_every_page() -> None:
    fetcher = FakeFetcher([_page(2, 2, [2])])
    cursor = _cursor(_page(1, 2, [1]), fetcher)

    assert [loc.id for loc in cursor.drain()] == [1, 2]


def test_drain_raises_stored_error() -> None:
    failure = SolusError(ErrorKind.TRANSPORT, "connection refused")
    cursor = _cursor(_page(1, 2, [1]), FakeFetcher([failure]))

    with pytest.raises(SolusError) as excinfo:
        cursor.drain()
    assert excinfo.value is failure


def test_initial_data_is_copied() -> None:
    links, meta, items = _page(1, 2, [1])
    cursor = PaginatedResponse(links=links, meta=meta, data=items, fetch_page=FakeFetcher([_page(2, 2, [2])]))

    cursor.next_page()

    assert [loc.id for loc in items] == [1]
    assert len(cursor) == 2


def test_iter_items_fetches_lazily() -> None:
    fetcher = FakeFetcher([_page(2, 2, [3])])
    cursor = _cursor(_page(1, 2, [1, 2]), fetcher)
    items = cursor.iter_items()

    assert next(items).id == 1
    assert next(items).id == 2
    assert fetcher.links == []
    assert next(items).id == 3
    assert list(items) == []
    assert len(fetcher.links) == 1


def test_parse_page_reads_envelope() -> None:
    links, meta, items = parse_page(
        {
            "data": [{"id": 7, "name": "Frankfurt", "unknown": True}],
            "links": {"next": None},
            "meta": {"current_page": 1, "last_page": 1, "from": 1, "to": 1, "total": 1},
        },
        Location,
    )

    assert links.next is None
    assert meta.from_ == 1
    assert items[0].name == "Frankfurt"


def test_missing_next_link_does_not_fetch() -> None:
    fetcher = FakeFetcher([])
    links, meta, items = _page(1, 3, [1])
    cursor = PaginatedResponse(links=ResponseLinks(), meta=meta, data=items, fetch_page=fetcher)

    assert not cursor.has_next
    assert cursor.next_page() is False
    assert fetcher.links == []
