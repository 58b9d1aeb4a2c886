"""Snapshot definition.

A snapshot bundles one manager project version with the two lookup
structures built for it. It is created by the refresh coordinator, populated
completely while still private to it, and only then published by rebinding a
single reference. Readers therefore see either the previous snapshot or the
next one, never a redirect table from one version paired with pages from
another.

Design Notes
------------
- **Immutability**: the dataclass is frozen and the matchers are never
  mutated after publication.
- **Disposal**: a replaced snapshot is simply dropped; it holds no resources.
"""

from __future__ import annotations

from dataclasses import dataclass

from flecto_agent.matcher.base import PageMatcher, RedirectMatcher


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Immutable view of the manager configuration at one version.

    Attributes
    ----------
    version : int
        Manager project version the matchers were built from.
    redirects : RedirectMatcher
        Populated redirect matcher.
    pages : PageMatcher
        Populated page matcher.
    """

    version: int
    redirects: RedirectMatcher
    pages: PageMatcher

    @property
    def redirect_count(self) -> int:
        return len(self.redirects)

    @property
    def page_count(self) -> int:
        return len(self.pages)


__all__ = ["Snapshot"]
