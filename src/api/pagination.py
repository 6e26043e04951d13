# This file handles pagination and sort parsing for the user and service list endpoints.
# It exists so every router uses the same deterministic rules for page size and ordering.
# Routers parse one `ListQuery`; services page the record store with its offset, limit, and direction.
# Invalid input raises ValueError, which routers answer with 400 INVALID_QUERY_PARAM.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SORT_ORDERS = {"asc", "desc"}


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: str

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    @property
    def as_text(self) -> str:
        return f"{self.field}:{self.order}"


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class ListQuery:
    pagination: PaginationSpec
    sort: SortSpec

    def metadata(self, *, total_count: int) -> dict[str, Any]:
        return {
            "page": self.pagination.page,
            "page_size": self.pagination.page_size,
            "total_count": total_count,
            "total_pages": compute_total_pages(total_count=total_count, page_size=self.pagination.page_size),
            "sort": self.sort.as_text,
        }


def normalize_pagination(
    *,
    page: int,
    page_size: int | None,
    limit: int | None,
    default_page_size: int,
    max_page_size: int,
) -> PaginationSpec:
    """Validate page/page_size; `limit` is an alias that wins over `page_size`."""

    resolved_page_size = limit if limit is not None else page_size
    if resolved_page_size is None:
        resolved_page_size = default_page_size
    if page < 1:
        raise ValueError("page must be >= 1")
    if resolved_page_size < 1:
        raise ValueError("page_size must be >= 1")
    if resolved_page_size > max_page_size:
        raise ValueError(f"page_size must be <= {max_page_size}")
    return PaginationSpec(page=page, page_size=resolved_page_size)


def parse_sort(
    *,
    requested_sort: str | None,
    default_sort: str,
    allowed_fields: set[str],
) -> SortSpec:
    """Parse `field[:asc|desc]` against the record store's sortable fields."""

    raw_sort = (requested_sort or default_sort).strip().lower()
    if not raw_sort:
        raise ValueError("sort cannot be empty")

    field, _, order = raw_sort.partition(":")
    order = order or "asc"

    if field not in allowed_fields:
        supported = ", ".join(sorted(allowed_fields))
        raise ValueError(f"Unsupported sort field '{field}'. Supported fields: {supported}")
    if order not in SORT_ORDERS:
        raise ValueError("sort order must be 'asc' or 'desc'")
    return SortSpec(field=field, order=order)


def parse_list_query(
    *,
    page: int,
    page_size: int | None,
    limit: int | None,
    sort: str | None,
    default_page_size: int,
    max_page_size: int,
    default_sort: str,
    allowed_fields: set[str],
) -> ListQuery:
    return ListQuery(
        pagination=normalize_pagination(
            page=page,
            page_size=page_size,
            limit=limit,
            default_page_size=default_page_size,
            max_page_size=max_page_size,
        ),
        sort=parse_sort(requested_sort=sort, default_sort=default_sort, allowed_fields=allowed_fields),
    )


def compute_total_pages(*, total_count: int, page_size: int) -> int:
    if total_count <= 0:
        return 0
    return ((total_count - 1) // page_size) + 1
