import math
import os
from typing import List, Sequence, Tuple, TypeVar

PAGE_SIZE = int(os.getenv("PAGE_SIZE", "20"))
MAX_VISIBLE_PAGES = 5

T = TypeVar("T")


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    # Never 0: an empty result still has one (empty) page
    return max(1, math.ceil(count / page_size))


def page_slice(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> List[T]:
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def page_window(current: int, total: int, max_visible: int = MAX_VISIBLE_PAGES) -> List[int]:
    """
    Page numbers to show around current, shifted near the edges so that
    min(max_visible, total) numbers are shown.
    """
    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    if end - start + 1 < max_visible:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))


def result_range(count: int, page: int, page_size: int = PAGE_SIZE) -> Tuple[int, int]:
    """1-based (first, last) index shown on page, or (0, 0) when there is nothing."""
    if count == 0:
        return 0, 0
    start = (page - 1) * page_size
    return start + 1, min(start + page_size, count)
