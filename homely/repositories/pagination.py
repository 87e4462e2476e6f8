"""Page container returned by repository search methods."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class PagedResult(Generic[T]):  # noqa: UP046
    """One page of results plus the total size of the filtered set.

    Attributes:
        items: Rows on this page
        total_count: Number of rows matching the filters across all pages
        page: 1-based page number
        page_size: Requested page size
    """

    items: Sequence[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)


def page_offset(page: int, page_size: int) -> int:
    """Translate a 1-based page number into a row offset."""
    return max(page - 1, 0) * page_size
