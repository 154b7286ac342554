"""Releases and archive command implementations."""

import click
from rich.console import Console

from apkdl.core import presenter, render
from apkdl.core.api import ApiClient, ApiError
from apkdl.core.presenter import ViewState
from apkdl.commands._options import api_url_option, primary_branch_option, timezone_option

console = Console()


def load_state(api: ApiClient, branch: str, primary_branch: str) -> ViewState:
    """Fetch releases into a fresh view state, exiting on failure."""
    try:
        releases = api.get_releases()
    except ApiError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    state = presenter.set_releases(ViewState(primary_branch=primary_branch), releases)
    if branch != presenter.ALL_BRANCHES:
        state = presenter.set_branch(state, branch)
    return state


def print_header(api: ApiClient, state: ViewState, subtitle: str | None = None) -> None:
    try:
        info = api.get_app_info()
    except ApiError:
        info = {}
    console.print(f"[bold]{info.get('name', 'APK Downloader')}[/bold]")
    console.print(f"[dim]{subtitle or info.get('description', '')}[/dim]")

    branches = presenter.branch_options(state.releases)
    if branches:
        console.print(f"[dim]Branches: {', '.join(branches)}[/dim]")
    console.print()


@click.command()
@click.option("--branch", "-b", default=presenter.ALL_BRANCHES, help="Only show this branch")
@click.option(
    "--sort",
    "-s",
    type=click.Choice(presenter.SORT_KEYS),
    default=presenter.DEFAULT_SORT,
    show_default=True,
)
@click.option("--more", "-m", default=0, help="Reveal this many extra batches of older builds")
@api_url_option
@timezone_option
@primary_branch_option
def releases(branch: str, sort: str, more: int, api_url: str, tz_name: str, primary_branch: str):
    """List APK releases with their latest build."""
    with ApiClient(api_url) as api:
        state = load_state(api, branch, primary_branch)
        state = presenter.set_sort(state, sort)
        for release in presenter.visible_releases(state):
            for _ in range(more):
                state = presenter.load_more(state, release.key)

        print_header(api, state)
        console.print(render.render_release_list(state, tz_name))


@click.command()
@click.option("--branch", "-b", default=presenter.ALL_BRANCHES, help="Only show this branch")
@click.option("--page", "-p", default=1, help="Page of builds to show for each release")
@api_url_option
@timezone_option
@primary_branch_option
def archive(branch: str, page: int, api_url: str, tz_name: str, primary_branch: str):
    """List every available build, main branch first."""
    with ApiClient(api_url) as api:
        state = load_state(api, branch, primary_branch)
        state = presenter.set_sort(state, "pinned")
        for release in presenter.visible_releases(state):
            state = presenter.go_to_page(state, release.key, page)

        print_header(api, state, subtitle="All available versions")
        console.print(render.render_archive(state, tz_name))
