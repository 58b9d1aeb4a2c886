"""Status reporting toward the manager.

Two report shapes exist:

- a full :class:`Agent` record after a rebuild (success or error, with the
  build duration), sent through ``post_agent_status``;
- a lightweight *hit* carrying only the agent name, sent when a refresh found
  the version unchanged.

Both are validated locally first: an empty agent name or an unknown agent type
is rejected with :class:`AgentValidationError` and nothing goes over the wire.
"""

from __future__ import annotations

import logging

from flecto_agent.core.contracts.agent import Agent, AgentStatus, AgentType, validate_agent
from flecto_agent.core.errors import AgentValidationError
from flecto_agent.remote.base import RemoteSource

logger = logging.getLogger(__name__)


class StatusReporter:
    """Send refresh outcomes for one named agent."""

    def __init__(self, remote: RemoteSource, name: str, agent_type: AgentType | str) -> None:
        self.remote = remote
        self.name = name
        self.agent_type = agent_type

    def report(self, agent: Agent) -> None:
        validate_agent(agent)
        self.remote.post_agent_status(agent)
        logger.debug("Reported %s for version %d", agent.status, agent.version)

    def hit(self) -> None:
        if not self.name.strip():
            raise AgentValidationError("agent name must not be empty")
        self.remote.post_agent_hit(self.name)

    def success(self, version: int, duration: float) -> None:
        self.report(self._record(version, AgentStatus.SUCCESS, "", duration))

    def failure(self, version: int, error: BaseException, duration: float) -> None:
        self.report(self._record(version, AgentStatus.ERROR, str(error), duration))

    def _record(self, version: int, status: AgentStatus, error: str, duration: float) -> Agent:
        return Agent(
            name=self.name,
            type=AgentType.parse(self.agent_type),
            version=version,
            status=status,
            error=error,
            load_duration=max(duration, 0.0),
        )


__all__ = ["StatusReporter"]
