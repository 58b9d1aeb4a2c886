"""
FastAPI host process serving redirects and pages from the local snapshot.

This module is a reference host for the agent: every incoming request is
answered from the published snapshot, without contacting the manager.

1.  **Lifecycle**: on startup the client builds its first snapshot and a
    background poll loop is started; on shutdown the loop is cancelled and
    joined.
2.  **Routing**: ``GET /health`` and ``POST /refresh`` are reserved; any
    other path is looked up as a redirect first, then as a page, else 404.
3.  **Exception Handling**: agent errors surfacing from a manual refresh are
    returned as structured JSON with HTTP 502.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`) so tests can pass
an already-initialized client and skip polling entirely.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from flecto_agent import __version__
from flecto_agent.core.errors import FlectoError
from flecto_agent.core.settings import load_settings
from flecto_agent.sync.client import FlectoClient

logger = logging.getLogger(__name__)

SHUTDOWN_JOIN_TIMEOUT = 5.0


def create_app(client: FlectoClient | None = None, *, poll: bool = True) -> FastAPI:
    """
    Construct the host application around a :class:`FlectoClient`.

    Parameters
    ----------
    client:
        Client to serve from. Built from the environment when omitted.
    poll:
        Initialize the client and run the poll loop for the app's lifetime.
        Tests pass ``False`` with a client they prepared themselves.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    agent = client if client is not None else FlectoClient.from_settings(load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if not poll:
            yield
            return

        try:
            agent.initialize()
        except FlectoError as exc:
            # Stay up: the poll loop retries and /health reports not ready.
            logger.error("Initial snapshot build failed: %s", exc)

        cancel = threading.Event()
        thread = agent.start_background(cancel)
        try:
            yield
        finally:
            cancel.set()
            thread.join(timeout=SHUTDOWN_JOIN_TIMEOUT)

    app = FastAPI(
        title="Flecto Agent",
        description="Redirects and static pages served from a local snapshot",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.client = agent

    @app.exception_handler(FlectoError)
    async def flecto_error_handler(request: Request, exc: FlectoError) -> JSONResponse:
        """Map agent errors to HTTP 502: the upstream manager misbehaved."""
        return JSONResponse(
            status_code=502,
            content={
                "error": type(exc).__name__,
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, object]:
        """Liveness plus readiness of the local snapshot."""
        return {
            "status": "ok",
            "version": __version__,
            "ready": agent.ready,
            "snapshot_version": agent.current_version(),
        }

    @app.post("/refresh", tags=["System"])
    def manual_refresh() -> dict[str, int]:
        """Trigger a refresh now; a no-op if one is already running."""
        agent.refresh()
        return {"snapshot_version": agent.current_version()}

    @app.api_route("/{_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def serve(request: Request, _path: str) -> Response:
        host = request.headers.get("host", "")
        path = request.url.path

        redirect, target = agent.match_redirect(host, path)
        if redirect is not None:
            return RedirectResponse(url=target, status_code=int(redirect.status))

        page = agent.match_page(host, path)
        if page is not None:
            return Response(content=page.content, media_type=str(page.content_type))

        return JSONResponse(status_code=404, content={"error": "Not Found", "path": path})

    return app


__all__ = ["create_app"]
