"""Error taxonomy shared by the remote adapter, the matchers and the client.

Every failure the agent can surface derives from :class:`FlectoError`, which is
itself a ``RuntimeError`` so callers that only care about "something went
wrong talking to the manager" can catch a single type.

- :class:`TransportError`   : the request never produced an HTTP response.
- :class:`ProtocolError`    : a response arrived but was not usable
  (unexpected status code, malformed JSON, unparseable version text).
- :class:`InvalidRuleError` : a redirect rule could not be compiled; aborts a
  rebuild while the published snapshot keeps serving.
- :class:`AgentValidationError` : local validation of the agent identity,
  raised before any network call.

Failing to acquire the refresh lock is *not* an error and has no type here.
"""

from __future__ import annotations


class FlectoError(RuntimeError):
    """Base class for all agent errors."""


class TransportError(FlectoError):
    """Network-level failure (connection refused, DNS, timeout, ...)."""


class ProtocolError(FlectoError):
    """The manager answered, but not with something we can use."""


class InvalidRuleError(FlectoError, ValueError):
    """A redirect rule carries a pattern that cannot be compiled."""


class AgentValidationError(FlectoError, ValueError):
    """The agent name or type is invalid."""


__all__ = [
    "FlectoError",
    "TransportError",
    "ProtocolError",
    "InvalidRuleError",
    "AgentValidationError",
]
