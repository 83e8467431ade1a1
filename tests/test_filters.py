from __future__ import annotations

from solus_sdk.filters import IconFilter, LocationFilter, PlanFilter, TaskFilter, filter_query
from solus_sdk.models import IconType, TaskStatus


def test_by_name_keeps_filter_subtype() -> None:
    flt = LocationFilter().by_name("Frankfurt")

    assert isinstance(flt, LocationFilter)
    assert flt.as_query() == {"filter[search]": "Frankfurt"}


def test_search_and_specific_filters_chain() -> None:
    flt = PlanFilter().by_name("basic").by_disk_size(20).by_storage_type("fb")

    assert flt.as_query() == {
        "filter[search]": "basic",
        "filter[disk]": "20",
        "filter[storage_type]": "fb",
    }
    assert IconFilter().by_name("ubuntu").by_type(IconType.OS).as_query() == {
        "filter[search]": "ubuntu",
        "filter[type]": "os",
    }


def test_filter_query_skips_empty_filters() -> None:
    assert filter_query(None) is None
    assert filter_query(TaskFilter()) is None
    assert filter_query(TaskFilter().by_status(TaskStatus.DONE)) == {"filter[status]": "done"}
