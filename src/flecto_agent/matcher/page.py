"""Default table-backed page matcher.

Host-bound pages (``basic_host``, path written ``example.com/robots.txt``)
take precedence over host-agnostic ones. Insertion never fails: a duplicate
key keeps the first page inserted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flecto_agent.core.contracts.page import Page, PageType
from flecto_agent.matcher.redirect import normalize_host, split_host_source


@dataclass(slots=True)
class PageTable:
    """Hash-map implementation of :class:`PageMatcher`."""

    _by_host: dict[tuple[str, str], Page] = field(default_factory=dict)
    _by_path: dict[str, Page] = field(default_factory=dict)
    _count: int = 0

    def insert(self, page: Page) -> None:
        if page.type is PageType.BASIC_HOST:
            self._by_host.setdefault(split_host_source(page.path), page)
        else:
            self._by_path.setdefault(page.path, page)
        self._count += 1

    def match(self, host: str, path: str) -> Page | None:
        return self._by_host.get((normalize_host(host), path)) or self._by_path.get(path)

    def __len__(self) -> int:
        return self._count


__all__ = ["PageTable"]
