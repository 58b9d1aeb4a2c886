from __future__ import annotations

from .agent import Agent, AgentStatus, AgentType, format_duration, validate_agent
from .listing import ItemList
from .page import Page, PageContentType, PageType
from .redirect import Redirect, RedirectStatus, RedirectType

__all__ = [
    "Agent",
    "AgentStatus",
    "AgentType",
    "format_duration",
    "validate_agent",
    "ItemList",
    "Page",
    "PageContentType",
    "PageType",
    "Redirect",
    "RedirectStatus",
    "RedirectType",
]
