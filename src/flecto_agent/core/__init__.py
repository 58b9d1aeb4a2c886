"""Core package initializer for flecto-agent.

Holds configuration, the error taxonomy, wire contracts and the snapshot value:
    from flecto_agent.core.settings import settings, load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
