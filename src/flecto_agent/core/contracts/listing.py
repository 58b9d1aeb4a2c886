"""Paginated list envelope used by the manager's collection endpoints.

Every page of a collection answers with the items on that page and the total
number of items across all pages; the client walks offsets until it has seen
``total`` items (see :mod:`flecto_agent.remote.pagination`).
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ItemList(BaseModel, Generic[T]):
    """One page of a collection."""

    items: list[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Item count across all pages")
    limit: int = Field(default=0, ge=0)
    offset: int = Field(default=0, ge=0)


__all__ = ["ItemList"]
