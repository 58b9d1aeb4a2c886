"""Redirect rule contract as served by the manager's `/redirects` endpoint.

A rule maps a *source* to a *target* with an HTTP redirect status. How the
source is interpreted depends on ``type``:

- ``basic``      : exact path, any host (``/old``)
- ``basic_host`` : exact host + path (``example.com/old``)
- ``regex``      : regular expression full-matched against the path
- ``regex_host`` : regular expression full-matched against ``host + path``

Regex targets may reference capture groups as ``$1`` or ``${1}``.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

from pydantic import BaseModel, ConfigDict, Field


class RedirectType(StrEnum):
    BASIC = "basic"
    BASIC_HOST = "basic_host"
    REGEX = "regex"
    REGEX_HOST = "regex_host"

    @property
    def is_regex(self) -> bool:
        return self in (RedirectType.REGEX, RedirectType.REGEX_HOST)

    @property
    def is_host_bound(self) -> bool:
        return self in (RedirectType.BASIC_HOST, RedirectType.REGEX_HOST)


class RedirectStatus(IntEnum):
    MOVED_PERMANENT = 301
    FOUND = 302
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308


class Redirect(BaseModel):
    """A single redirect rule."""

    model_config = ConfigDict(frozen=True)

    type: RedirectType = Field(default=RedirectType.BASIC)
    source: str = Field(min_length=1, description="Path, host/path or pattern")
    target: str = Field(description="Destination URL or path")
    status: RedirectStatus = Field(default=RedirectStatus.MOVED_PERMANENT)


__all__ = ["Redirect", "RedirectType", "RedirectStatus"]
