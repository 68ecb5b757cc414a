"""
campus/paginate.py -- Fixed-size pagination for list pages.

Pages are 1-based.  An empty list still has one (empty) page so that list
routes always exist.
"""

from __future__ import annotations

import math
from typing import TypeVar

from campus.models.content import Page

T = TypeVar("T")


def get_page_count(items: list, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(len(items) / page_size))


def get_page_range(items: list, page_size: int) -> list[int]:
    """Return ``[1, ..., n]`` for the pages needed to show *items*."""
    return list(range(1, get_page_count(items, page_size) + 1))


def paginate(items: list[T], page_size: int) -> list[Page[T]]:
    """Split *items* into consecutive pages of *page_size*."""
    pages = get_page_count(items, page_size)
    return [
        Page(items=items[index * page_size:(index + 1) * page_size],
             page=index + 1, pages=pages)
        for index in range(pages)
    ]


def get_page(items: list[T], page_size: int, page: int) -> Page[T]:
    """Return page *page* (1-based).

    Raises
    ------
    IndexError
        If *page* is outside ``get_page_range``.
    """
    pages = paginate(items, page_size)
    if not 1 <= page <= len(pages):
        raise IndexError(f"Page {page} does not exist (1-{len(pages)}).")
    return pages[page - 1]
