"""
ASGI entry point for the flecto-agent host application.

This module exposes a `get_app()` factory for ASGI servers (Uvicorn) and a
`main()` used by the CLI. Environment variables are loaded from `.env` before
settings are read so that `FLECTO_*` values in the file take effect.

Usage
-----
Run via the module entry point:
    $ python -m flecto_agent.api.server

Or via uvicorn directly:
    $ uvicorn flecto_agent.api.server:get_app --factory
"""

from __future__ import annotations

from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from flecto_agent.api.app import create_app
from flecto_agent.core.settings import get_logger, load_settings


def get_app() -> FastAPI:
    """Build the application from the current environment."""
    load_dotenv(dotenv_path=Path(".env"))
    load_settings.cache_clear()
    get_logger()
    return create_app()


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Serve the host application until interrupted."""
    settings = load_settings()
    uvicorn.run(
        "flecto_agent.api.server:get_app",
        factory=True,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
