"""View state and the pure functions that derive what to display.

The terminal client keeps everything it knows in a ViewState. Each user
action is a function returning a new state; rendering only reads it.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from apkdl.models.build import BuildRun
from apkdl.models.release import ApkFile, Release, parse_timestamp


ALL_BRANCHES = "all"
DEFAULT_SORT = "date-desc"
SORT_KEYS = ("date-desc", "date-asc", "name-asc", "name-desc", "pinned")

INITIAL_OLDER_VISIBLE = 3
LOAD_MORE_STEP = 5
ARCHIVE_PAGE_SIZE = 3

# Typical duration of a full APK build, used for progress estimates
TYPICAL_BUILD_SECONDS = 25 * 60
MAX_ESTIMATED_PROGRESS = 95

# Artifact names end in -YYYYMMDD-HHMMSS.<ext>, stamped in UTC by the runner
FILENAME_TIMESTAMP = re.compile(r"-(\d{8})-(\d{6})\.[A-Za-z0-9]+$")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class FilterState:
    branch: str = ALL_BRANCHES
    sort: str = DEFAULT_SORT


@dataclass(frozen=True)
class ViewState:
    """Everything the release views are rendered from."""

    releases: tuple[Release, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    # release key -> number of older artifacts shown
    disclosed: dict[str, int] = field(default_factory=dict)
    # release key -> current archive page (1-based)
    pages: dict[str, int] = field(default_factory=dict)
    primary_branch: str = "main"


@dataclass(frozen=True)
class ArtifactPage:
    items: list[ApkFile]
    page: int
    total_pages: int
    start: int
    end: int


# State transitions


def set_releases(state: ViewState, releases: list[Release]) -> ViewState:
    """Replace the release list, keeping filters and pagination."""
    return replace(state, releases=tuple(releases))


def set_branch(state: ViewState, branch: str) -> ViewState:
    return replace(
        state, filters=replace(state.filters, branch=branch), pages={}
    )


def set_sort(state: ViewState, sort: str) -> ViewState:
    if sort not in SORT_KEYS:
        raise ValueError(f"Unknown sort: {sort}. Use one of: {', '.join(SORT_KEYS)}")
    return replace(state, filters=replace(state.filters, sort=sort))


def clear_filters(state: ViewState) -> ViewState:
    return replace(state, filters=FilterState(), pages={})


def load_more(state: ViewState, release_key: str) -> ViewState:
    """Reveal the next batch of older artifacts for one release."""
    shown = state.disclosed.get(release_key, INITIAL_OLDER_VISIBLE)
    disclosed = dict(state.disclosed)
    disclosed[release_key] = shown + LOAD_MORE_STEP
    return replace(state, disclosed=disclosed)


def go_to_page(state: ViewState, release_key: str, page: int) -> ViewState:
    pages = dict(state.pages)
    pages[release_key] = page
    return replace(state, pages=pages)


# Artifact ordering


def artifact_timestamp(name: str) -> str | None:
    """Get the YYYYMMDDHHMMSS token embedded in an artifact name."""
    match = FILENAME_TIMESTAMP.search(name)
    if match:
        return match.group(1) + match.group(2)
    return None


def _token_time(token: str | None) -> datetime | None:
    if not token:
        return None
    try:
        return datetime.strptime(token, "%Y%m%d%H%M%S").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def artifact_time(apk: ApkFile, release: Release | None = None) -> datetime | None:
    """When an artifact was built.

    Prefers the filename timestamp, then the upload time, then the
    parent release's publish time.
    """
    built = _token_time(artifact_timestamp(apk.name))
    if built is None:
        built = parse_timestamp(apk.uploaded_at)
    if built is None and release is not None:
        built = release.published
    return built


def sorted_artifacts(release: Release) -> list[ApkFile]:
    """Artifacts of a release, newest first."""

    def sort_key(apk: ApkFile):
        return (
            artifact_time(apk, release) or _EPOCH,
            artifact_timestamp(apk.name) or "",
        )

    return sorted(release.apk_files, key=sort_key, reverse=True)


def latest_artifact(release: Release) -> ApkFile | None:
    artifacts = sorted_artifacts(release)
    return artifacts[0] if artifacts else None


def release_display_time(release: Release) -> datetime | None:
    """Time shown in a release header: its newest build, else publish time."""
    latest = latest_artifact(release)
    if latest is not None:
        return artifact_time(latest, release)
    return release.published


# Filtering and sorting


def branch_options(releases) -> list[str]:
    return sorted({r.branch for r in releases})


def apply_filters(
    releases, filters: FilterState, primary_branch: str = "main"
) -> list[Release]:
    """Releases matching the branch filter, in the requested order."""
    if filters.branch == ALL_BRANCHES:
        filtered = list(releases)
    else:
        filtered = [r for r in releases if r.branch == filters.branch]

    if filters.sort == "date-desc":
        filtered.sort(key=lambda r: r.published or _EPOCH, reverse=True)
    elif filters.sort == "date-asc":
        filtered.sort(key=lambda r: r.published or _EPOCH)
    elif filters.sort == "name-asc":
        filtered.sort(key=lambda r: r.name.casefold())
    elif filters.sort == "name-desc":
        filtered.sort(key=lambda r: r.name.casefold(), reverse=True)
    elif filters.sort == "pinned":
        filtered.sort(key=lambda r: release_display_time(r) or _EPOCH, reverse=True)
        # stable sort keeps the newest-first order inside each group
        filtered.sort(key=lambda r: r.branch != primary_branch)

    return filtered


def visible_releases(state: ViewState) -> list[Release]:
    return apply_filters(state.releases, state.filters, state.primary_branch)


# Progressive disclosure and pagination


def older_artifacts(release: Release) -> list[ApkFile]:
    return sorted_artifacts(release)[1:]


def visible_older(state: ViewState, release: Release) -> list[ApkFile]:
    shown = state.disclosed.get(release.key, INITIAL_OLDER_VISIBLE)
    return older_artifacts(release)[:shown]


def remaining_older(state: ViewState, release: Release) -> int:
    return len(older_artifacts(release)) - len(visible_older(state, release))


def artifact_page(
    release: Release, page: int = 1, page_size: int = ARCHIVE_PAGE_SIZE
) -> ArtifactPage:
    """One page of a release's artifacts, newest first."""
    artifacts = sorted_artifacts(release)
    total_pages = max(1, -(-len(artifacts) // page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    end = min(start + page_size, len(artifacts))
    return ArtifactPage(
        items=artifacts[start:end],
        page=page,
        total_pages=total_pages,
        start=start,
        end=end,
    )


def current_page(state: ViewState, release: Release) -> ArtifactPage:
    return artifact_page(release, state.pages.get(release.key, 1))


# Builds and formatting


def build_progress(build: BuildRun, now: datetime | None = None) -> int:
    """Estimated completion percentage of a running build."""
    started = parse_timestamp(build.started_at)
    if started is None:
        return 0
    now = now or datetime.now(timezone.utc)
    elapsed = max(0, (now - started).total_seconds())
    return min(MAX_ESTIMATED_PROGRESS, int(elapsed / TYPICAL_BUILD_SECONDS * 100))


def elapsed_seconds(build: BuildRun, now: datetime | None = None) -> int:
    started = parse_timestamp(build.started_at)
    if started is None:
        return 0
    now = now or datetime.now(timezone.utc)
    return max(0, int((now - started).total_seconds()))


def format_size(size: int) -> str:
    return f"{size / (1024 * 1024):.2f} MB"


def format_duration(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}m {secs}s"
