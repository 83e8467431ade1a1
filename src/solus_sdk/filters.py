"""Query filters for list endpoints.

Each filter is a small builder; methods return the filter itself so calls
can be chained::

    TaskFilter().by_status("running").by_compute_resource_id(3)
"""

from __future__ import annotations

import enum
from typing import TypeVar


class Filter:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def _add(self, key: str, value: object) -> None:
        if isinstance(value, enum.Enum):
            value = value.value
        self._data[key] = str(value)

    def as_query(self) -> dict[str, str]:
        return dict(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


S = TypeVar("S", bound="SearchFilter")


class SearchFilter(Filter):
    def by_name(self: S, name: str) -> S:
        self._add("filter[search]", name)
        return self


class TaskFilter(Filter):
    def by_action(self, action: object) -> TaskFilter:
        self._add("filter[action]", action)
        return self

    def by_status(self, status: object) -> TaskFilter:
        self._add("filter[status]", status)
        return self

    def by_compute_resource_id(self, compute_resource_id: int) -> TaskFilter:
        self._add("filter[compute_resource_id]", compute_resource_id)
        return self

    def by_compute_resource_vm_id(self, server_id: int) -> TaskFilter:
        self._add("filter[compute_resource_vm_id]", server_id)
        return self


class LocationFilter(SearchFilter):
    pass


class SSHKeyFilter(SearchFilter):
    pass


class OsImageFilter(SearchFilter):
    pass


class IconFilter(SearchFilter):
    def by_type(self, icon_type: object) -> IconFilter:
        self._add("filter[type]", icon_type)
        return self


class PlanFilter(SearchFilter):
    def by_storage_type(self, storage_type: str) -> PlanFilter:
        self._add("filter[storage_type]", storage_type)
        return self

    def by_image_format(self, image_format: str) -> PlanFilter:
        self._add("filter[image_format]", image_format)
        return self

    def by_disk_size(self, disk: int) -> PlanFilter:
        self._add("filter[disk]", disk)
        return self


class VirtualServerFilter(Filter):
    def by_user_id(self, user_id: int) -> VirtualServerFilter:
        self._add("filter[user_id]", user_id)
        return self

    def by_compute_resource_id(self, compute_resource_id: int) -> VirtualServerFilter:
        self._add("filter[compute_resource_id]", compute_resource_id)
        return self

    def by_status(self, status: object) -> VirtualServerFilter:
        self._add("filter[status]", status)
        return self

    def by_virtualization_type(self, virtualization_type: object) -> VirtualServerFilter:
        self._add("filter[virtualization_type]", virtualization_type)
        return self


def filter_query(flt: Filter | None) -> dict[str, str] | None:
    if flt is None or not flt:
        return None
    return flt.as_query()
