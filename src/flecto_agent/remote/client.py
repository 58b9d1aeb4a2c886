# -----------------------------------------------------------------------------
# Synchronous HTTP adapter for the Flecto manager API.
#
# The adapter performs the five calls the refresh coordinator needs:
#   - GET   .../version                    plain-text project version
#   - GET   .../redirects?limit=&offset=   one page of redirect rules
#   - GET   .../pages?limit=&offset=       one page of static pages
#   - POST  .../agents                     agent status after a rebuild
#   - PATCH .../agents/{name}/hit          "still on the same version"
#
# Every request carries the configured authorization header with the bearer
# token. The implementation uses only `urllib.request`; unit tests patch the
# single `_send()` seam so that no real HTTP calls are made during CI.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ValidationError

from flecto_agent.core.contracts.agent import Agent, validate_agent
from flecto_agent.core.contracts.listing import ItemList
from flecto_agent.core.contracts.page import Page
from flecto_agent.core.contracts.redirect import Redirect
from flecto_agent.core.errors import ProtocolError, TransportError
from flecto_agent.core.settings import Settings

M = TypeVar("M", bound=BaseModel)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status line and body of one HTTP exchange."""

    status: int
    reason: str
    body: bytes


@dataclass(slots=True)
class ManagerClient:
    """Stateless client for one manager project.

    Parameters
    ----------
    settings:
        Source of the endpoint URLs and of the authorization header.
    timeout_seconds:
        Socket timeout applied to every request; timeout policy lives here,
        not in the refresh coordinator.
    """

    settings: Settings
    timeout_seconds: float = 10.0

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_settings(cls, settings: Settings) -> ManagerClient:
        return cls(settings=settings, timeout_seconds=settings.request_timeout)

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def get_version(self) -> int:
        """Return the project version published by the manager.

        Raises
        ------
        TransportError
            If the manager cannot be reached.
        ProtocolError
            On a non-200 answer or a body that is not an integer.
        """
        url = self.settings.url_api_version()
        raw = self._expect_ok(url, self._send("GET", url))
        text = raw.body.decode("utf-8", errors="replace").strip()
        try:
            version = int(text)
        except ValueError as exc:
            raise ProtocolError(f"invalid version from {url}: {text!r}") from exc
        if version < 0:
            raise ProtocolError(f"invalid version from {url}: {version}")
        return version

    def get_redirects_page(self, offset: int, limit: int) -> ItemList[Redirect]:
        url = self._paged_url(self.settings.url_api_redirects(), offset, limit)
        raw = self._expect_ok(url, self._send("GET", url))
        return self._decode(url, raw, ItemList[Redirect])

    def get_pages_page(self, offset: int, limit: int) -> ItemList[Page]:
        url = self._paged_url(self.settings.url_api_pages(), offset, limit)
        raw = self._expect_ok(url, self._send("GET", url))
        return self._decode(url, raw, ItemList[Page])

    def post_agent_status(self, agent: Agent) -> None:
        """Send a full status record; invalid records never reach the wire."""
        validate_agent(agent)
        url = self.settings.url_api_agents()
        body = agent.model_dump_json().encode("utf-8")
        self._expect_ok(
            url,
            self._send("POST", url, body=body, headers={"Content-Type": "application/json"}),
        )

    def post_agent_hit(self, name: str) -> None:
        url = self.settings.url_api_agents_hit(quote(name, safe=""))
        self._expect_ok(url, self._send("PATCH", url))

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _send(
        self,
        method: str,
        url: str,
        *,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        """Perform one authenticated HTTP request.

        This is the only place that touches the network; tests patch it at
        the class level to return canned :class:`RawResponse` objects.

        Non-2xx answers are returned, not raised, so that callers can build a
        uniform "unexpected status code" error including the body.

        Raises
        ------
        TransportError
            If no HTTP response could be obtained.
        """
        request_headers = dict(headers or {})
        request_headers[self.settings.header_authorization_name] = (
            f"Bearer {self.settings.token_jwt}"
        )
        logger.debug("%s %s", method, url)

        try:
            request = urllib.request.Request(
                url=url,
                data=body,
                headers=request_headers,
                method=method,
            )
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                return RawResponse(status=resp.status, reason=resp.reason, body=resp.read())
        except urllib.error.HTTPError as exc:
            return RawResponse(status=exc.code, reason=str(exc.reason), body=exc.read())
        except (urllib.error.URLError, OSError, ValueError) as exc:
            # ValueError covers URLs urllib refuses to parse.
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _expect_ok(url: str, raw: RawResponse) -> RawResponse:
        if raw.status != 200:
            detail = raw.body.decode("utf-8", errors="replace")
            raise ProtocolError(
                f"unexpected status code for {url}: {raw.reason} ({raw.status}) {detail}"
            )
        return raw

    @staticmethod
    def _decode(url: str, raw: RawResponse, model: type[M]) -> M:
        try:
            payload: Any = json.loads(raw.body.decode("utf-8"))
            return model.model_validate(payload)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise ProtocolError(f"malformed response body from {url}: {exc}") from exc

    @staticmethod
    def _paged_url(base: str, offset: int, limit: int) -> str:
        return f"{base}?{urlencode({'limit': limit, 'offset': offset})}"


__all__ = ["ManagerClient", "RawResponse"]
