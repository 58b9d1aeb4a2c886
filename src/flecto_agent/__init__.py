"""flecto-agent: keep a local, queryable snapshot of Flecto manager rules.

The package polls a Flecto manager for its project version and, when it
changes, rebuilds an immutable snapshot of redirect rules and static pages
that a host process can query without touching the network.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
