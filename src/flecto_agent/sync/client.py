"""
Refresh coordinator: the agent's public surface for a host process.

This module owns the currently published :class:`Snapshot` and is the only
code that ever replaces it.

Responsibilities
----------------
- **Lookups**: ``match_redirect`` / ``match_page`` / ``current_version`` read
  the published snapshot once and never take a lock.
- **Refresh**: check the manager version and, when it moved, rebuild a new
  snapshot in private and publish it with a single reference assignment.
- **Single-flight**: refreshes are serialized with a try-acquire lock;
  a caller that finds a refresh in progress returns at once, without error,
  I/O or status report.
- **Polling**: drive refreshes on a fixed interval until cancelled.

Status reports
--------------
Every refresh that acquires the lock and learns the remote version sends
exactly one report: a *hit* when the version is unchanged, a success record
after a publish, an error record after a failed rebuild. A failure to send
the success or hit report is raised to the caller even though local state is
already current; a failure to send the error record is logged, and the
rebuild error is raised instead.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from flecto_agent.core.contracts.agent import AgentType
from flecto_agent.core.contracts.page import Page
from flecto_agent.core.contracts.redirect import Redirect
from flecto_agent.core.errors import AgentValidationError, FlectoError
from flecto_agent.core.settings import Settings
from flecto_agent.core.snapshot import Snapshot
from flecto_agent.matcher.base import PageMatcher, RedirectMatcher
from flecto_agent.matcher.page import PageTable
from flecto_agent.matcher.redirect import RedirectTable
from flecto_agent.remote.base import RemoteSource
from flecto_agent.remote.client import ManagerClient
from flecto_agent.remote.pagination import PAGE_SIZE, fetch_all
from flecto_agent.sync.poller import PollLoop
from flecto_agent.sync.status import StatusReporter

logger = logging.getLogger(__name__)


class FlectoClient:
    """Keep a local snapshot of one manager project in sync.

    Parameters
    ----------
    remote:
        Adapter for the manager API.
    agent_name, agent_type:
        Identity used in status reports.
    interval:
        Seconds between two version checks when polling.
    redirect_matcher_factory, page_matcher_factory:
        Build an empty matcher for each rebuild.
    clock:
        Monotonic clock used to time rebuilds.
    page_size:
        Items requested per page when fetching collections.
    """

    def __init__(
        self,
        remote: RemoteSource,
        *,
        agent_name: str,
        agent_type: AgentType | str = AgentType.DEFAULT,
        interval: float = 300.0,
        redirect_matcher_factory: Callable[[], RedirectMatcher] = RedirectTable,
        page_matcher_factory: Callable[[], PageMatcher] = PageTable,
        clock: Callable[[], float] = time.monotonic,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.remote = remote
        self.agent_name = agent_name
        self.agent_type = agent_type
        self.interval = interval
        self.page_size = page_size
        self._redirect_matcher_factory = redirect_matcher_factory
        self._page_matcher_factory = page_matcher_factory
        self._clock = clock

        self._snapshot: Snapshot = Snapshot(
            version=0,
            redirects=redirect_matcher_factory(),
            pages=page_matcher_factory(),
        )
        self._ready = False
        self._refresh_lock = threading.Lock()
        self.reporter = StatusReporter(remote, agent_name, agent_type)

    @classmethod
    def from_settings(cls, settings: Settings) -> FlectoClient:
        return cls(
            ManagerClient.from_settings(settings),
            agent_name=settings.agent_name,
            agent_type=settings.agent_type,
            interval=settings.interval_check,
        )

    # --------------------------------------------------------------------- #
    # Readers
    # --------------------------------------------------------------------- #
    @property
    def current_snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def ready(self) -> bool:
        """True once a snapshot built from the manager has been published."""
        return self._ready

    def current_version(self) -> int:
        return self._snapshot.version

    def match_redirect(self, host: str, path: str) -> tuple[Redirect | None, str]:
        return self._snapshot.redirects.match(host, path)

    def match_page(self, host: str, path: str) -> Page | None:
        return self._snapshot.pages.match(host, path)

    # --------------------------------------------------------------------- #
    # Refresh
    # --------------------------------------------------------------------- #
    def initialize(self) -> None:
        """Validate the agent identity and build the first snapshot.

        The rebuild is forced even when the manager reports version 0, so a
        normal return always means :attr:`ready` is True, unless another
        refresh was already running and this call was a no-op.

        Raises
        ------
        AgentValidationError
            If the agent type or name is invalid; no I/O happens.
        FlectoError
            If the version query or the rebuild fails.
        """
        AgentType.parse(self.agent_type)
        if not self.agent_name.strip():
            raise AgentValidationError("agent name must not be empty")
        self._refresh(force=True)

    def refresh(self) -> None:
        """Rebuild the snapshot if the manager version changed.

        Safe to call from any thread, any number of times. When another
        refresh holds the lock this returns immediately.

        Raises
        ------
        FlectoError
            On version query, rebuild, or report failure. The published
            snapshot is unchanged unless the failure is the post-publish
            success report.
        """
        self._refresh(force=False)

    def _refresh(self, *, force: bool) -> None:
        if not self._refresh_lock.acquire(blocking=False):
            logger.debug("Refresh already in progress, skipping")
            return
        try:
            version = self.remote.get_version()

            if not force and version == self._snapshot.version:
                logger.debug("Version %d unchanged", version)
                self.reporter.hit()
                return

            started = self._clock()
            try:
                snapshot = self._rebuild()
            except Exception as exc:
                duration = self._clock() - started
                logger.error("Rebuild for version %d failed after %.3fs: %s", version, duration, exc)
                try:
                    self.reporter.failure(version, exc, duration)
                except FlectoError as report_exc:
                    logger.warning("Could not report rebuild failure: %s", report_exc)
                raise

            duration = self._clock() - started
            logger.info(
                "Published version %d (%d redirects, %d pages) in %.3fs",
                snapshot.version,
                snapshot.redirect_count,
                snapshot.page_count,
                duration,
            )
            self.reporter.success(snapshot.version, duration)
        finally:
            self._refresh_lock.release()

    def _rebuild(self) -> Snapshot:
        """Build a complete snapshot in private, then publish it.

        Any exception leaves the published snapshot untouched; the partial
        matchers are simply dropped.
        """
        version = self.remote.get_version()

        redirects = self._redirect_matcher_factory()
        for redirect in fetch_all(self.remote.get_redirects_page, self.page_size):
            redirects.insert(redirect)

        pages = self._page_matcher_factory()
        for page in fetch_all(self.remote.get_pages_page, self.page_size):
            pages.insert(page)

        snapshot = Snapshot(version=version, redirects=redirects, pages=pages)
        # Single reference store: readers see the old or the new snapshot.
        self._snapshot = snapshot
        self._ready = True
        return snapshot

    # --------------------------------------------------------------------- #
    # Polling
    # --------------------------------------------------------------------- #
    def start_polling(self, cancel: threading.Event) -> None:
        """Block the calling thread, refreshing every :attr:`interval` seconds.

        Returns once ``cancel`` is set. Each call runs a fresh poll loop.
        """
        PollLoop(self.refresh, self.interval).run(cancel)

    def start_background(self, cancel: threading.Event) -> threading.Thread:
        """Run :meth:`start_polling` on a daemon thread and return it."""
        return PollLoop(self.refresh, self.interval).start(cancel)


__all__ = ["FlectoClient"]
