"""Rich renderables for releases and builds."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rich.console import Group
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from apkdl.core import presenter
from apkdl.core.presenter import ViewState
from apkdl.models.build import BuildRun
from apkdl.models.release import Release, parse_timestamp


def _zone(tz_name: str):
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def format_time(value: datetime | None, tz_name: str = "UTC", with_time: bool = True) -> str:
    if value is None:
        return "Unknown Date"
    local = value.astimezone(_zone(tz_name))
    if with_time:
        return local.strftime("%b %d, %Y %H:%M")
    return local.strftime("%B %d, %Y")


def _release_title(release: Release, tz_name: str) -> Text:
    title = Text()
    title.append(release.name, style="bold")
    title.append(f"  [{release.branch}]", style="cyan")
    title.append(
        f"  📅 {format_time(presenter.release_display_time(release), tz_name, with_time=False)}",
        style="dim",
    )
    title.append(f"  👤 {release.author}", style="dim")
    return title


def _artifact_table(release: Release, artifacts, tz_name: str, latest_name: str | None) -> Table:
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("APK", no_wrap=True)
    table.add_column("Size", justify="right", no_wrap=True)
    table.add_column("Built", no_wrap=True)
    table.add_column("Download", overflow="fold")

    for apk in artifacts:
        name = Text(apk.name)
        if apk.name == latest_name:
            name.append(" Latest", style="bold green")
        table.add_row(
            name,
            presenter.format_size(apk.size),
            format_time(presenter.artifact_time(apk, release), tz_name),
            f"[link={apk.download_url}]{apk.download_url}[/link]",
        )
    return table


def render_release(state: ViewState, release: Release, tz_name: str = "UTC"):
    """A release card: the latest APK plus the disclosed older ones."""
    latest = presenter.latest_artifact(release)
    if latest is None:
        body = Text("No APK files available", style="dim")
    else:
        older = presenter.older_artifacts(release)
        parts = [_artifact_table(release, [latest], tz_name, latest.name)]
        if older:
            parts.append(Text(f"\nOlder Builds ({len(older)})", style="bold"))
            parts.append(
                _artifact_table(
                    release, presenter.visible_older(state, release), tz_name, None
                )
            )
            remaining = presenter.remaining_older(state, release)
            if remaining:
                more = min(remaining, presenter.LOAD_MORE_STEP)
                parts.append(Text(f"{more} more older build(s) available", style="dim"))
        body = Group(*parts)

    return Panel(body, title=_release_title(release, tz_name), title_align="left")


def render_release_list(state: ViewState, tz_name: str = "UTC"):
    releases = presenter.visible_releases(state)
    if not state.releases:
        return Text("No APK releases found")
    if not releases:
        return Text("No releases match your filters")
    return Group(*(render_release(state, r, tz_name) for r in releases))


def render_archive_release(state: ViewState, release: Release, tz_name: str = "UTC"):
    """A release card listing every artifact, one page at a time."""
    if not release.apk_files:
        return Panel(
            Text("No APK files available", style="dim"),
            title=_release_title(release, tz_name),
            title_align="left",
        )

    page = presenter.current_page(state, release)
    latest = presenter.latest_artifact(release)
    header = Text(
        f"All Versions ({len(release.apk_files)}) - Showing {page.start + 1}-{page.end}",
        style="bold",
    )
    footer = Text(f"Page {page.page} of {page.total_pages}", style="dim")
    return Panel(
        Group(header, _artifact_table(release, page.items, tz_name, latest.name), footer),
        title=_release_title(release, tz_name),
        title_align="left",
    )


def render_archive(state: ViewState, tz_name: str = "UTC"):
    releases = presenter.visible_releases(state)
    if not state.releases:
        return Text("No APK releases found")
    if not releases:
        return Text("No releases match your filters")
    return Group(*(render_archive_release(state, r, tz_name) for r in releases))


def render_active_builds(builds: list[BuildRun], now: datetime | None = None):
    if not builds:
        return Text("No active builds", style="dim")

    cards = []
    for build in builds:
        progress = presenter.build_progress(build, now)
        elapsed = presenter.elapsed_seconds(build, now)
        heading = Text("⚙️  Building: ")
        heading.append(build.branch, style="bold")
        heading.append(f"  {progress}%", style="cyan")
        cards.append(
            Panel(
                Group(
                    heading,
                    ProgressBar(total=100, completed=progress),
                    Text(build.commit_message),
                    Text(
                        f"Started {presenter.format_duration(elapsed)} ago • By {build.author}",
                        style="dim",
                    ),
                    Text(build.url, style="link " + build.url) if build.url else Text(""),
                ),
                border_style="yellow",
            )
        )
    return Group(*cards)


def render_recent_builds(builds: list[BuildRun], tz_name: str = "UTC"):
    if not builds:
        return Text("No recent builds", style="dim")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Branch")
    table.add_column("Status")
    table.add_column("Started")
    table.add_column("Duration", justify="right")
    table.add_column("Author")
    table.add_column("Title")

    for build in builds:
        if build.conclusion == "success":
            status = "[green]success[/green]"
        elif build.conclusion:
            status = f"[red]{build.conclusion}[/red]"
        else:
            status = f"[yellow]{build.status}[/yellow]"
        table.add_row(
            build.branch,
            status,
            format_time(parse_timestamp(build.started_at), tz_name),
            presenter.format_duration(build.duration),
            build.author,
            build.commit_message,
        )
    return table
