"""Centralized agent configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

It also owns the manager endpoint layout, so every HTTP path the agent talks to
is built in one place:

    {manager_url}/api/namespace/{namespace}/project/{project}/{version|redirects|pages|agents}
"""

from __future__ import annotations

import logging
import os
import socket
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from flecto_agent.core.contracts.agent import AgentType

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

PACKAGE_LOGGER = "flecto_agent"


class Settings(BaseSettings):
    """Typed agent configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `FLECTO_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    manager_url : str
        Base URL of the Flecto manager, without the `/api` suffix.
    namespace_code, project_code : str
        Identify the project whose rules this agent mirrors.
    agent_name : str
        Name reported in status and hit calls; defaults to the host name.
    agent_type : AgentType
        Kind of host process embedding the agent.
    token_jwt : str
        Bearer token sent in `header_authorization_name`.
    interval_check : float
        Seconds between two version checks of the poll loop.
    request_timeout : float
        Socket timeout in seconds for each manager call.
    """

    environment: EnvName = Field(default="dev", alias="FLECTO_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")

    manager_url: str = Field(default="", alias="FLECTO_MANAGER_URL")
    namespace_code: str = Field(default="", alias="FLECTO_NAMESPACE")
    project_code: str = Field(default="", alias="FLECTO_PROJECT")

    agent_name: str = Field(default_factory=socket.gethostname, alias="FLECTO_AGENT_NAME")
    agent_type: AgentType = Field(default=AgentType.DEFAULT, alias="FLECTO_AGENT_TYPE")

    token_jwt: str = Field(default="", alias="FLECTO_TOKEN")
    header_authorization_name: str = Field(default="Authorization", alias="FLECTO_AUTH_HEADER")

    interval_check: float = Field(default=300.0, gt=0, alias="FLECTO_INTERVAL_CHECK")
    request_timeout: float = Field(default=10.0, gt=0, alias="FLECTO_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)

    # ----- Manager endpoints ------------------------------------------------
    def url_api(self) -> str:
        return f"{self.manager_url}/api"

    def url_api_project(self) -> str:
        return f"{self.url_api()}/namespace/{self.namespace_code}/project/{self.project_code}"

    def url_api_version(self) -> str:
        return f"{self.url_api_project()}/version"

    def url_api_redirects(self) -> str:
        return f"{self.url_api_project()}/redirects"

    def url_api_pages(self) -> str:
        return f"{self.url_api_project()}/pages"

    def url_api_agents(self) -> str:
        return f"{self.url_api_project()}/agents"

    def url_api_agents_hit(self, name: str) -> str:
        return f"{self.url_api_agents()}/{name}/hit"


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("FLECTO_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger configured to the current `LOG_LEVEL`.

    Modules log through `logging.getLogger(__name__)`; entry points call this
    once for the package logger so every `flecto_agent.*` record ends up on a
    single stream handler.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "load_settings", "settings", "get_logger", "PACKAGE_LOGGER"]
