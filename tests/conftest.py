"""Shared test doubles.

`FakeRemote` stands in for the manager API: it serves in-memory redirect and
page collections through the paginated interface, records every call, and
can be told to fail at any step.
"""

from __future__ import annotations

import threading
from typing import Any

import pytest

from flecto_agent.core.contracts import Agent, ItemList, Page, Redirect
from flecto_agent.core.errors import TransportError
from flecto_agent.sync.client import FlectoClient


class FakeRemote:
    """In-memory `RemoteSource` with call recording and failure injection."""

    def __init__(
        self,
        version: int = 1,
        redirects: list[Redirect] | None = None,
        pages: list[Page] | None = None,
    ) -> None:
        self.version = version
        self.redirects = list(redirects or [])
        self.pages = list(pages or [])

        self.calls: list[tuple[str, Any]] = []
        self.statuses: list[Agent] = []
        self.hits: list[str] = []

        self.version_error: Exception | None = None
        self.redirects_error: Exception | None = None
        self.pages_error: Exception | None = None
        self.status_error: Exception | None = None
        self.hit_error: Exception | None = None

        # Optional gates: when set, the matching call signals `*_entered`
        # and blocks until the gate is released.
        self.version_gate: threading.Event | None = None
        self.version_entered = threading.Event()
        self.pages_gate: threading.Event | None = None
        self.pages_entered = threading.Event()

        self._lock = threading.Lock()

    def _record(self, name: str, arg: Any = None) -> None:
        with self._lock:
            self.calls.append((name, arg))

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    # ----- RemoteSource ------------------------------------------------------
    def get_version(self) -> int:
        self._record("get_version")
        if self.version_gate is not None:
            self.version_entered.set()
            self.version_gate.wait(timeout=5)
        if self.version_error is not None:
            raise self.version_error
        return self.version

    def get_redirects_page(self, offset: int, limit: int) -> ItemList[Redirect]:
        self._record("get_redirects_page", (offset, limit))
        if self.redirects_error is not None:
            raise self.redirects_error
        return ItemList[Redirect](
            items=self.redirects[offset : offset + limit],
            total=len(self.redirects),
            limit=limit,
            offset=offset,
        )

    def get_pages_page(self, offset: int, limit: int) -> ItemList[Page]:
        self._record("get_pages_page", (offset, limit))
        if self.pages_gate is not None:
            self.pages_entered.set()
            self.pages_gate.wait(timeout=5)
        if self.pages_error is not None:
            raise self.pages_error
        return ItemList[Page](
            items=self.pages[offset : offset + limit],
            total=len(self.pages),
            limit=limit,
            offset=offset,
        )

    def post_agent_status(self, agent: Agent) -> None:
        self._record("post_agent_status", agent)
        if self.status_error is not None:
            raise self.status_error
        self.statuses.append(agent)

    def post_agent_hit(self, name: str) -> None:
        self._record("post_agent_hit", name)
        if self.hit_error is not None:
            raise self.hit_error
        self.hits.append(name)


@pytest.fixture  # type: ignore[misc]
def remote() -> FakeRemote:
    """A manager at version 1 with one redirect and one page."""
    return FakeRemote(
        version=1,
        redirects=[Redirect(source="/old", target="/new", status=301)],
        pages=[Page(path="/robots.txt", content="User-agent: *")],
    )


@pytest.fixture  # type: ignore[misc]
def client(remote: FakeRemote) -> FlectoClient:
    """A client wired to `remote`, not yet initialized."""
    return FlectoClient(remote, agent_name="test-node", interval=0.01)


@pytest.fixture  # type: ignore[misc]
def network_error() -> TransportError:
    return TransportError("connection refused")
