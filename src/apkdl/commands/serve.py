"""Serve command implementation."""

import click
import uvicorn
from rich.console import Console

from apkdl.core.config import ConfigError, get_config
from apkdl.core.log import setup_logging
from apkdl.server import create_app

console = Console()


@click.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default: PORT or 3000)")
@click.option(
    "--log-level",
    default="info",
    show_default=True,
    type=click.Choice(["debug", "info", "warning", "error"]),
)
def serve(host: str, port: int | None, log_level: str):
    """Run the API server that reshapes GitHub releases and builds."""
    setup_logging(log_level)

    try:
        config = get_config()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    port = port or config.port
    console.print(f"[green]APK Downloader server running on http://localhost:{port}[/green]")
    console.print(f"[dim]Fetching releases from: {config.repo_slug}[/dim]")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=log_level,
        log_config=None,
    )
