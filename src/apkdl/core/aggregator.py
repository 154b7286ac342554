"""Fetch releases and workflow runs from GitHub and reshape them."""

import logging

from apkdl.core.config import AppConfig
from apkdl.core.github import GitHubClient, FetchError
from apkdl.models.build import BuildRun
from apkdl.models.release import Release

logger = logging.getLogger(__name__)

ACTIVE_BUILDS_PAGE_SIZE = 10
RECENT_BUILDS_PAGE_SIZE = 20


def get_releases(client: GitHubClient, config: AppConfig) -> list[Release]:
    """Get releases whose tag matches the configured prefix.

    Raises FetchError when GitHub can't be reached or returns something
    that doesn't look like a release list.
    """
    raw = client.get_releases(config.owner, config.repo)

    releases = []
    for data in raw:
        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag.startswith(config.tag_pattern):
            continue
        try:
            releases.append(
                Release.from_api_response(
                    data, config.tag_pattern, config.artifact_suffix
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FetchError(f"Malformed release {tag}: {e!r}") from e

    logger.debug("Fetched %d releases from %s", len(releases), config.repo_slug)
    return releases


def _get_builds(
    client: GitHubClient,
    config: AppConfig,
    status: str | None,
    per_page: int,
) -> list[BuildRun]:
    raw = client.get_workflow_runs(
        config.owner, config.repo, status=status, per_page=per_page
    )

    builds = []
    for data in raw:
        if not isinstance(data, dict) or data.get("name") != config.workflow_name:
            continue
        try:
            builds.append(BuildRun.from_api_response(data))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FetchError(f"Malformed workflow run {data.get('id')}: {e!r}") from e
    return builds


def get_active_builds(client: GitHubClient, config: AppConfig) -> list[BuildRun]:
    """Get in-progress runs of the build workflow."""
    return _get_builds(client, config, "in_progress", ACTIVE_BUILDS_PAGE_SIZE)


def get_recent_builds(client: GitHubClient, config: AppConfig) -> list[BuildRun]:
    """Get the most recent runs of the build workflow, any status."""
    return _get_builds(client, config, None, RECENT_BUILDS_PAGE_SIZE)
