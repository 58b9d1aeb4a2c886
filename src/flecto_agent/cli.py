# src/flecto_agent/cli.py
"""
flecto-agent Command Line Interface (CLI).

This module implements the operator-facing terminal interface using `typer`
and `rich`. Every command reads its configuration from `FLECTO_*` environment
variables (or a `.env` file), exactly like the long-running agent.

Commands
--------
- **check**: build one snapshot and print its version and rule counts.
- **match**: build one snapshot and show what a host/path resolves to.
- **watch**: build a snapshot, then keep polling until Ctrl-C.
- **serve**: run the reference FastAPI host process.

Usage
-----
    $ flecto-agent check
    $ flecto-agent match example.com /old
    $ flecto-agent watch --interval 30
    $ flecto-agent serve --port 8080
"""

from __future__ import annotations

import threading
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from flecto_agent.core.errors import FlectoError
from flecto_agent.core.settings import Settings, get_logger, load_settings
from flecto_agent.sync.client import FlectoClient

# Ensure env vars (like FLECTO_TOKEN) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="flecto-agent: mirror Flecto manager redirects and pages locally.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _settings() -> Settings:
    load_settings.cache_clear()
    settings = load_settings()
    get_logger()
    return settings


def _initialized_client(settings: Settings) -> FlectoClient:
    """Build a client and its first snapshot, exiting with code 1 on failure."""
    client = FlectoClient.from_settings(settings)
    try:
        with console.status(f"[cyan]Loading {settings.url_api_project()}..."):
            client.initialize()
    except FlectoError as e:
        console.print(f"[bold red]❌ Initialization failed:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    return client


def _render_summary(client: FlectoClient) -> None:
    snapshot = client.current_snapshot
    table = Table(show_header=False, box=None)
    table.add_row("Version", str(snapshot.version))
    table.add_row("Redirects", str(snapshot.redirect_count))
    table.add_row("Pages", str(snapshot.page_count))
    console.print(Panel(table, title="Snapshot", border_style="green"))


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def check() -> None:
    """Build one snapshot from the manager and print a summary."""
    client = _initialized_client(_settings())
    _render_summary(client)


@app.command()  # type: ignore[misc]
def match(
    host: Annotated[str, typer.Argument(help="Request host, e.g. 'example.com'.")],
    path: Annotated[str, typer.Argument(help="Request path, e.g. '/old'.")],
) -> None:
    """Show the redirect and page a request would resolve to."""
    client = _initialized_client(_settings())

    redirect, target = client.match_redirect(host, path)
    if redirect is not None:
        console.print(
            f"[bold yellow]Redirect[/bold yellow] {redirect.source} → {target} "
            f"({int(redirect.status)})"
        )
    page = client.match_page(host, path)
    if page is not None:
        console.print(f"[bold cyan]Page[/bold cyan] {page.path} ({page.content_type})")
    if redirect is None and page is None:
        console.print(f"[dim]No rule matches {host}{path}[/dim]")
        raise typer.Exit(code=1)


@app.command()  # type: ignore[misc]
def watch(
    interval: Annotated[
        float | None,
        typer.Option("--interval", "-i", min=0.1, help="Override the poll interval (seconds)."),
    ] = None,
) -> None:
    """Build a snapshot, then poll the manager until interrupted."""
    settings = _settings()
    if interval is not None:
        settings = settings.model_copy(update={"interval_check": interval})

    client = _initialized_client(settings)
    _render_summary(client)

    cancel = threading.Event()
    console.print(f"[dim]Polling every {settings.interval_check:g}s, Ctrl-C to stop.[/dim]")
    try:
        client.start_polling(cancel)
    except KeyboardInterrupt:
        cancel.set()
    console.print(f"[bold green]✅ Stopped[/bold green] at version {client.current_version()}")


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address.")] = "0.0.0.0",
    port: Annotated[int, typer.Option("--port", "-p", help="Bind port.")] = 8000,
) -> None:
    """Run the reference HTTP host serving redirects and pages."""
    from flecto_agent.api.server import main as serve_main

    serve_main(host=host, port=port)


if __name__ == "__main__":
    app()
