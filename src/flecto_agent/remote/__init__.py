from __future__ import annotations

from .base import RemoteSource
from .client import ManagerClient, RawResponse
from .pagination import PAGE_SIZE, fetch_all

__all__ = ["RemoteSource", "ManagerClient", "RawResponse", "PAGE_SIZE", "fetch_all"]
