from __future__ import annotations

from .client import FlectoClient
from .poller import PollLoop, PollState
from .status import StatusReporter

__all__ = ["FlectoClient", "PollLoop", "PollState", "StatusReporter"]
