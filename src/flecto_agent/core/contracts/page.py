"""Page: a static document served directly by the agent's host."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class PageType(StrEnum):
    BASIC = "basic"
    BASIC_HOST = "basic_host"


class PageContentType(StrEnum):
    TEXT_PLAIN = "text/plain"
    XML = "application/xml"
    HTML = "text/html"
    JSON = "application/json"


class Page(BaseModel):
    """A static page bound to a path (``basic``) or host + path (``basic_host``)."""

    model_config = ConfigDict(frozen=True)

    type: PageType = Field(default=PageType.BASIC)
    path: str = Field(min_length=1)
    content: str = ""
    content_type: PageContentType = Field(default=PageContentType.TEXT_PLAIN)


__all__ = ["Page", "PageType", "PageContentType"]
