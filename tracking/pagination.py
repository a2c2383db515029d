"""Pagination of already-fetched lists."""

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 9


@dataclass
class Page(Generic[T]):
    """One page of a list.

    Attributes:
        items: Items on this page.
        page: Zero-based page number.
        size: Page size.
        total_elements: Number of items in the whole list.
    """

    items: List[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def first_index(self) -> int:
        """One-based index of the first item shown, 0 when the page is empty."""
        return self.page * self.size + 1 if self.items else 0

    @property
    def last_index(self) -> int:
        """One-based index of the last item shown, 0 when the page is empty."""
        if not self.items:
            return 0
        return self.page * self.size + len(self.items)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 0


def paginate(items: Sequence[T], page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Slice one page out of a list.

    Args:
        items: The full list.
        page: Zero-based page number. Pages past the end are empty.
        size: Items per page.

    Raises:
        ValueError: If page is negative or size is not positive.
    """
    if size < 1:
        raise ValueError(f"Page size must be positive, got {size}")
    if page < 0:
        raise ValueError(f"Page number cannot be negative, got {page}")

    start = page * size
    return Page(
        items=list(items[start : start + size]),
        page=page,
        size=size,
        total_elements=len(items),
    )
