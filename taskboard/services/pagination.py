"""
Page/limit pagination shared by the list endpoints.

Query parameters are parsed leniently: anything that is not a positive
integer falls back to the default instead of failing the request.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from taskboard.core.config import settings
from taskboard.schemas.base import PaginationMeta

T = TypeVar("T")


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @classmethod
    def from_query(cls, page: Optional[Any] = None, limit: Optional[Any] = None) -> "PageRequest":
        return cls(
            page=_positive_int(page, settings.DEFAULT_PAGE),
            limit=_positive_int(limit, settings.DEFAULT_PAGE_LIMIT),
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: List[T] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_items: int = 0
    items_per_page: int = 10

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    def meta(self) -> PaginationMeta:
        return PaginationMeta(
            current_page=self.current_page,
            total_pages=self.total_pages,
            total_items=self.total_items,
            items_per_page=self.items_per_page,
            has_next_page=self.has_next_page,
            has_previous_page=self.has_previous_page,
        )


def calculate_total_pages(total_items: int, limit: int) -> int:
    """Ceiling division; zero items means zero pages."""
    return (total_items + limit - 1) // limit if limit > 0 else 0


def list_page(
    request: PageRequest,
    count: Callable[[], int],
    fetch_slice: Callable[[int, int], Sequence[T]],
) -> PageResult[T]:
    """Build one page from a count query and an ordered (skip, limit) slice query."""
    total_items = count()
    items = list(fetch_slice(request.skip, request.limit))
    return PageResult(
        items=items,
        current_page=request.page,
        total_pages=calculate_total_pages(total_items, request.limit),
        total_items=total_items,
        items_per_page=request.limit,
    )
