"""Search, single-field filtering and page windowing over fetched documents.

List endpoints fetch a bounded set of documents from the store and then
narrow it here, so every client sees the same filtering the admin console
applies: a case-insensitive substring match across a few fields, ANDed
with at most one categorical filter, then a fixed-size page slice.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from math import ceil
from typing import Any

ALL = "all"

FilterPredicate = Callable[[dict[str, Any], str], bool]


def get_path(record: dict[str, Any], path: str, default: Any = None) -> Any:
    """Read a dotted field path ("address.city") from a nested dict."""
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def matches_search(record: dict[str, Any], query: str | None, fields: Sequence[str]) -> bool:
    """True when query is empty or is a case-insensitive substring of any field."""
    if not query:
        return True
    needle = query.lower()
    for path in fields:
        value = get_path(record, path)
        if value is not None and needle in str(value).lower():
            return True
    return False


def field_equals(path: str) -> FilterPredicate:
    """Filter predicate comparing one field to the filter value."""

    def _predicate(record: dict[str, Any], value: str) -> bool:
        return get_path(record, path) == value

    return _predicate


def field_in(*paths: str) -> FilterPredicate:
    """Filter predicate that matches when any of the given fields equals the value."""

    def _predicate(record: dict[str, Any], value: str) -> bool:
        return any(get_path(record, p) == value for p in paths)

    return _predicate


@dataclass(frozen=True)
class Page:
    items: list[dict[str, Any]]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }


def paginate(items: Sequence[dict[str, Any]], page: int, limit: int) -> Page:
    """Slice one page out of items (page is 1-based)."""
    page = max(1, page)
    start = (page - 1) * limit
    return Page(items=list(items[start:start + limit]), page=page, limit=limit, total=len(items))


@dataclass(frozen=True)
class ListQuery:
    """Parsed list parameters: free-text search, one categorical filter, page window."""

    search: str | None = None
    filter: str = ALL
    page: int = 1
    limit: int = 10


def apply_list_query(
    records: Iterable[dict[str, Any]],
    query: ListQuery,
    *,
    search_fields: Sequence[str],
    predicate: FilterPredicate | None = None,
) -> Page:
    """Search, filter and paginate records.

    Args:
        records: Documents as fetched from the store (order is preserved).
        query: Search/filter/page parameters.
        search_fields: Dotted paths searched by query.search.
        predicate: Categorical filter; ignored when query.filter is "all" or empty.

    Returns:
        The requested page plus the total after filtering.
    """
    use_filter = predicate is not None and query.filter and query.filter != ALL
    matched = [
        r
        for r in records
        if matches_search(r, query.search, search_fields)
        and (not use_filter or predicate(r, query.filter))
    ]
    return paginate(matched, query.page, query.limit)
