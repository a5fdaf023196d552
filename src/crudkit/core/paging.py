"""
Paging and filtering model shared by every CRUD service.

A :class:`DataFilter` describes which slice of a result set a caller wants
(page, limit, sort, optional offset).  :func:`normalize_filter` turns any
caller-supplied filter, including ``None``, into a canonical one whose
``limit`` is always positive.  :class:`PagedList` is the result envelope:
one page of items plus the paging metadata derived from the total count.

Architecture::

    caller filter (or None)
          │
          ▼
    normalize_filter(filter, default_page_size)
          │   limit ≤ 0      → default_page_size
          │   sort "a:desc"  → [SortSpec("a", desc=True)]
          │   offset > 0     → page = offset // limit
          ▼
    DataFilter (canonical) ──► build_order_by() → "a desc,b"
          │
          ▼
    PagedList.create(items, total_count, filter)
              total_pages  = ceil(total_count / limit)
              has_next     = page < total_pages - 1
              has_previous = page != 0

Examples:
    >>> f = normalize_filter(DataFilter(page=1, sort="name:asc,age:desc"), 10)
    >>> f.limit, build_order_by(f)
    (10, 'name,age desc')

Tags:
    pagination, filtering, sorting, pydantic, crudkit

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crudkit.core.errors import ValidationError

T = TypeVar("T")
U = TypeVar("U")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


class SortSpec(BaseModel):
    """One ordering term: a column and its direction."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(description="Storage column to order by")
    desc: bool = Field(default=False, description="Descending when true")

    @field_validator("column")
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"invalid sort column {value!r}")
        return value


class DataFilter(BaseModel):
    """Paging/sorting request.

    ``sort`` is the compact wire form (``"name:asc,age:desc"``); it is parsed
    into ``sort_by`` by :func:`normalize_filter`.  ``offset``, when positive,
    overrides ``page``.
    """

    model_config = ConfigDict(extra="ignore")

    page: int = Field(default=0, ge=0, description="Page index (0-based)")
    limit: int = Field(default=0, description="Items per page; defaults applied if ≤ 0")
    sort: str | None = Field(default=None, description="Comma-separated column[:asc|desc] tokens")
    sort_by: list[SortSpec] = Field(default_factory=list, description="Parsed ordering terms")
    offset: int = Field(default=0, ge=0, description="Explicit row offset; overrides page when > 0")

    @property
    def skip(self) -> int:
        """Row offset of the first item on this page."""
        return self.page * self.limit


def paged(page: int, limit: int) -> DataFilter:
    """Shortcut for an unsorted filter."""
    return DataFilter(page=page, limit=limit)


def paged_and_sorted(page: int, limit: int, sort_by: Sequence[SortSpec]) -> DataFilter:
    """Shortcut for a sorted filter."""
    return DataFilter(page=page, limit=limit, sort_by=list(sort_by))


def parse_sort(spec: str) -> list[SortSpec]:
    """Parse ``"col[:asc|desc],..."`` into ordered :class:`SortSpec` terms.

    Only ``desc`` (any case) means descending; any other direction token,
    or none at all, is ascending.  Empty tokens are skipped.

    Raises:
        ValidationError: a column is not a plain SQL identifier.
    """
    terms: list[SortSpec] = []
    for token in spec.split(","):
        token = token.strip()
        if not token:
            continue
        column, _, direction = token.partition(":")
        column = column.strip()
        if not _IDENTIFIER.match(column):
            raise ValidationError(
                f"invalid sort column {column!r}",
                field="sort",
                value=spec,
                constraint="identifier",
            )
        terms.append(SortSpec(column=column, desc=direction.strip().lower() == "desc"))
    return terms


def normalize_filter(data_filter: DataFilter | None, default_page_size: int) -> DataFilter:
    """Return the canonical form of *data_filter*.

    The input is never mutated.  After normalization ``limit >= 1`` and
    ``page >= 0`` hold; an out-of-range page is left as is and simply
    yields an empty page.
    """
    if data_filter is None:
        return DataFilter(page=0, limit=default_page_size)

    updates: dict[str, Any] = {}
    limit = data_filter.limit if data_filter.limit > 0 else default_page_size
    updates["limit"] = limit
    if data_filter.sort:
        updates["sort_by"] = parse_sort(data_filter.sort)
    if data_filter.offset > 0:
        updates["page"] = data_filter.offset // limit
    return data_filter.model_copy(update=updates)


def build_order_by(data_filter: DataFilter) -> str:
    """Join sort terms as ``col`` / ``col desc``; empty when unsorted."""
    return ",".join(
        f"{term.column} desc" if term.desc else term.column for term in data_filter.sort_by
    )


class PagedList(BaseModel, Generic[T]):
    """One page of items plus paging metadata.

    Metadata is computed once, at construction, from ``total_count`` and the
    filter; it reflects the query snapshot and is not refreshed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T] = Field(default_factory=list, description="Items on this page")
    total_count: int = Field(ge=0, description="Matches across all pages")
    page: int = Field(ge=0, description="Current page (0-based)")
    limit: int = Field(ge=1, description="Items per page")
    total_pages: int = Field(ge=0, description="ceil(total_count / limit)")
    has_next: bool = Field(description="True if a later page exists")
    has_previous: bool = Field(description="True unless this is page 0")
    skip: int = Field(ge=0, description="Row offset of the first item")

    @classmethod
    def create(cls, items: Sequence[Any], total_count: int, data_filter: DataFilter) -> PagedList:
        """Build a page from a normalized filter (``limit >= 1``)."""
        limit = data_filter.limit
        total_pages = (total_count + limit - 1) // limit
        return cls(
            items=list(items),
            total_count=total_count,
            page=data_filter.page,
            limit=limit,
            total_pages=total_pages,
            has_next=data_filter.page < total_pages - 1,
            has_previous=data_filter.page != 0,
            skip=data_filter.page * limit,
        )

    def map(self, fn: Callable[[T], U]) -> PagedList[U]:
        """Return the same page with every item converted by *fn*."""
        return PagedList(items=[fn(item) for item in self.items], **self.model_dump(exclude={"items"}))


__all__ = [
    "SortSpec",
    "DataFilter",
    "PagedList",
    "paged",
    "paged_and_sorted",
    "parse_sort",
    "normalize_filter",
    "build_order_by",
]
