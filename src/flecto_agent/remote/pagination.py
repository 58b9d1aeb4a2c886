"""Paginated bulk fetch.

The manager serves collections in fixed-size pages, each declaring the items
on that page and the total across all pages. :func:`fetch_all` walks the
offsets and returns every item in server order:

    total=0   -> one request  (offset 0), []
    total=100 -> one request  (offset 0)
    total=101 -> two requests (offsets 0, 100), 100 + 1 items

A failing page aborts the whole fetch: the exception propagates and nothing
accumulated so far is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from flecto_agent.core.contracts.listing import ItemList

T = TypeVar("T")

PAGE_SIZE = 100

logger = logging.getLogger(__name__)


def fetch_all(
    fetch_page: Callable[[int, int], ItemList[T]],
    page_size: int = PAGE_SIZE,
) -> list[T]:
    """Collect a whole collection by calling ``fetch_page(offset, limit)``.

    Parameters
    ----------
    fetch_page:
        Callable returning one :class:`ItemList` for the given offset/limit.
    page_size:
        Items requested per call.

    Returns
    -------
    list[T]
        All items, in the order the pages returned them.
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    items: list[T] = []
    offset = 0
    while True:
        page = fetch_page(offset, page_size)
        items.extend(page.items)
        offset += page_size
        if offset >= page.total:
            break

    logger.debug("Fetched %d items in %d page(s)", len(items), offset // page_size)
    return items


__all__ = ["fetch_all", "PAGE_SIZE"]
