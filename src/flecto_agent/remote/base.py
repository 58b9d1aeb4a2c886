"""Remote source interface consumed by the refresh coordinator."""

from __future__ import annotations

from typing import Protocol

from flecto_agent.core.contracts.agent import Agent
from flecto_agent.core.contracts.listing import ItemList
from flecto_agent.core.contracts.page import Page
from flecto_agent.core.contracts.redirect import Redirect


class RemoteSource(Protocol):
    """Everything the coordinator needs from the manager. Pure I/O, no state.

    All methods raise :class:`~flecto_agent.core.errors.FlectoError`
    subclasses on failure.
    """

    def get_version(self) -> int: ...

    def get_redirects_page(self, offset: int, limit: int) -> ItemList[Redirect]: ...

    def get_pages_page(self, offset: int, limit: int) -> ItemList[Page]: ...

    def post_agent_status(self, agent: Agent) -> None: ...

    def post_agent_hit(self, name: str) -> None: ...


__all__ = ["RemoteSource"]
