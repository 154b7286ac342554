"""Builds command implementation."""

import click
from rich.console import Console

from apkdl.core import render
from apkdl.core.api import ApiClient
from apkdl.commands._options import api_url_option, timezone_option

console = Console()


@click.command()
@click.option("--recent", "-r", is_flag=True, help="Show recent builds instead of running ones")
@api_url_option
@timezone_option
def builds(recent: bool, api_url: str, tz_name: str):
    """Show running or recent APK builds."""
    with ApiClient(api_url) as api:
        if recent:
            console.print(render.render_recent_builds(api.get_recent_builds(), tz_name))
        else:
            console.print(render.render_active_builds(api.get_active_builds()))
