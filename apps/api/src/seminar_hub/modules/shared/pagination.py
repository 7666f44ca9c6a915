"""
Pagination

Cursor-less paging. A strategy decides how many rows to fetch for a
requested page and how to derive ``has_more`` from what came back.

``ApproximateHasMore`` is the default and reports ``has_more`` when the
store returned a full page. That is a known imprecision: a collection
holding exactly ``limit`` rows reports ``has_more=True`` with an empty
next page. ``LookaheadHasMore`` is the exact alternative and can be
swapped in per repository without touching call sites.
"""

from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar

from seminar_hub.core.config import settings
from seminar_hub.core.errors import ValidationFailedError

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Requested page: ``limit`` rows after skipping ``skip``."""

    limit: int = settings.default_page_size
    skip: int = 0

    def __post_init__(self) -> None:
        if self.limit < 1 or self.limit > settings.max_page_size:
            raise ValidationFailedError(
                f"limit must be between 1 and {settings.max_page_size}",
                error_code="INVALID_PAGE_SIZE",
            )
        if self.skip < 0:
            raise ValidationFailedError("skip must not be negative", error_code="INVALID_PAGE_SKIP")


@dataclass
class Page(Generic[T]):
    items: list[T]
    has_more: bool
    limit: int
    skip: int = 0


class PaginationStrategy(Protocol):
    def fetch_size(self, page: PageRequest) -> int: ...

    def has_more(self, page: PageRequest, fetched_count: int) -> bool: ...


class ApproximateHasMore:
    """``has_more`` iff the store returned exactly ``limit`` rows."""

    def fetch_size(self, page: PageRequest) -> int:
        return page.limit

    def has_more(self, page: PageRequest, fetched_count: int) -> bool:
        return fetched_count == page.limit


class LookaheadHasMore:
    """Exact: fetch one extra row and report whether it exists."""

    def fetch_size(self, page: PageRequest) -> int:
        return page.limit + 1

    def has_more(self, page: PageRequest, fetched_count: int) -> bool:
        return fetched_count > page.limit


__all__ = [
    "PageRequest",
    "Page",
    "PaginationStrategy",
    "ApproximateHasMore",
    "LookaheadHasMore",
]
