"""Agent status record posted to the manager after each rebuild.

The record is ephemeral: it is built by the refresh coordinator, validated,
serialized, sent, and dropped. Nothing about it is retained locally.

Duration format
---------------
``load_duration`` is held in seconds and serialized the way the manager's Go
runtime prints durations, e.g. ``"1.5s"``, ``"250ms"``, ``"1m30s"``, ``"0s"``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_serializer

from flecto_agent.core.errors import AgentValidationError


class AgentType(StrEnum):
    DEFAULT = "default"
    TRAEFIK = "traefik"
    NGINX = "nginx"

    @classmethod
    def is_valid(cls, value: object) -> bool:
        return value in {member.value for member in cls}

    @classmethod
    def parse(cls, value: object) -> AgentType:
        """Coerce `value` to a member or raise :class:`AgentValidationError`."""
        if not cls.is_valid(value):
            raise AgentValidationError(f"invalid agent type: {value}")
        return cls(value)


class AgentStatus(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


def _fraction(value: int, digits: int) -> str:
    whole, frac = divmod(value, 10**digits)
    text = f"{frac:0{digits}d}".rstrip("0")
    return f"{whole}.{text}" if text else str(whole)


def format_duration(seconds: float) -> str:
    """Render ``seconds`` the way Go's ``time.Duration.String`` does.

    Sub-second values use the largest of ``ns``, ``µs`` and ``ms`` that keeps
    the integer part non-zero; longer ones are composed as ``1h2m3.5s``.
    Precision is whole nanoseconds.
    """
    ns = round(seconds * 1e9)
    if ns <= 0:
        return "0s"
    if ns < 1_000:
        return f"{ns}ns"
    if ns < 1_000_000:
        return f"{_fraction(ns, 3)}µs"
    if ns < 1_000_000_000:
        return f"{_fraction(ns, 6)}ms"

    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    text = f"{_fraction(rest, 9)}s"
    if hours:
        return f"{hours}h{minutes}m{text}"
    if minutes:
        return f"{minutes}m{text}"
    return text


class Agent(BaseModel):
    """Outcome of one refresh, as reported to the manager."""

    name: str
    type: AgentType = Field(default=AgentType.DEFAULT)
    version: int = Field(default=0, ge=0)
    status: AgentStatus = Field(default=AgentStatus.SUCCESS)
    error: str = ""
    load_duration: float = Field(default=0.0, ge=0.0, description="Build time in seconds")

    @field_serializer("load_duration")
    def _serialize_duration(self, value: float) -> str:
        return format_duration(value)


def validate_agent(agent: Agent) -> None:
    """Reject records the manager would refuse, before anything is sent.

    Raises
    ------
    AgentValidationError
        If the agent name is empty.
    """
    if not agent.name.strip():
        raise AgentValidationError("agent name must not be empty")


__all__ = ["Agent", "AgentType", "AgentStatus", "format_duration", "validate_agent"]
