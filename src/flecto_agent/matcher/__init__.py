from __future__ import annotations

from .base import PageMatcher, RedirectMatcher
from .page import PageTable
from .redirect import RedirectTable

__all__ = ["RedirectMatcher", "PageMatcher", "RedirectTable", "PageTable"]
