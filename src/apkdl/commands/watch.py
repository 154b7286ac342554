"""Watch command implementation."""

import logging
import threading

import click
from rich.console import Console
from rich.rule import Rule

from apkdl.core import presenter, render
from apkdl.core.api import ApiClient, ApiError
from apkdl.core.poller import DEFAULT_POLL_INTERVAL, Poller
from apkdl.core.presenter import ViewState
from apkdl.commands._options import api_url_option, primary_branch_option, timezone_option

console = Console()
logger = logging.getLogger(__name__)


class BuildWatcher:
    """Refreshes builds and releases until no build is running."""

    def __init__(
        self,
        api: ApiClient,
        state: ViewState,
        interval: float = DEFAULT_POLL_INTERVAL,
        tz_name: str = "UTC",
        poller: Poller | None = None,
    ):
        self.api = api
        self.state = state
        self.tz_name = tz_name
        self.finished = threading.Event()
        self.error: Exception | None = None
        self.poller = poller or Poller(self.refresh, interval)

    def refresh(self) -> None:
        """Run one cycle; an unexpected error ends the watch."""
        try:
            self._refresh()
        except Exception as e:
            logger.exception("Refresh failed")
            self.error = e
            self.poller.stop()
            self.finished.set()

    def _refresh(self) -> None:
        builds = self.api.get_active_builds()

        console.print(Rule("Active builds"))
        console.print(render.render_active_builds(builds))

        try:
            releases = self.api.get_releases()
        except ApiError as e:
            console.print(f"[red]Error:[/red] {e}")
        else:
            self.state = presenter.set_releases(self.state, releases)
            console.print(Rule("Releases"))
            console.print(render.render_release_list(self.state, self.tz_name))

        if builds:
            self.poller.schedule()
        else:
            self.poller.stop()
            self.finished.set()

    def run(self) -> None:
        self.refresh()
        try:
            self.finished.wait()
        except KeyboardInterrupt:
            self.poller.stop()


@click.command()
@click.option(
    "--interval",
    "-i",
    default=DEFAULT_POLL_INTERVAL,
    show_default=True,
    help="Seconds between refreshes",
)
@click.option("--branch", "-b", default=presenter.ALL_BRANCHES, help="Only show this branch")
@api_url_option
@timezone_option
@primary_branch_option
def watch(interval: float, branch: str, api_url: str, tz_name: str, primary_branch: str):
    """Follow running builds, refreshing until they finish."""
    state = ViewState(primary_branch=primary_branch)
    if branch != presenter.ALL_BRANCHES:
        state = presenter.set_branch(state, branch)

    with ApiClient(api_url) as api:
        watcher = BuildWatcher(api, state, interval=interval, tz_name=tz_name)
        watcher.run()

    if watcher.error is not None:
        console.print(f"[red]Error:[/red] {watcher.error}")
        raise SystemExit(1)
    console.print("[green]No builds running[/green]")
