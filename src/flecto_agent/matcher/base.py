"""Matcher capability interfaces.

The refresh coordinator only needs two operations from a lookup structure:
``insert`` while a snapshot is being built, and ``match`` once it has been
published. Any backing structure (tree, sorted list, host map) satisfies these
protocols; after publication a matcher is never mutated again.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from flecto_agent.core.contracts.page import Page
from flecto_agent.core.contracts.redirect import Redirect


@runtime_checkable
class RedirectMatcher(Protocol):
    def insert(self, redirect: Redirect) -> None:
        """Add a rule; raise :class:`InvalidRuleError` on a malformed pattern."""
        ...

    def match(self, host: str, path: str) -> tuple[Redirect | None, str]:
        """Return the matching rule and its resolved target, or ``(None, "")``."""
        ...

    def __len__(self) -> int: ...


@runtime_checkable
class PageMatcher(Protocol):
    def insert(self, page: Page) -> None:
        """Add a page. Never fails."""
        ...

    def match(self, host: str, path: str) -> Page | None: ...

    def __len__(self) -> int: ...


__all__ = ["RedirectMatcher", "PageMatcher"]
