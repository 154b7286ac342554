import httpx
import pytest

from apkdl.core.config import AppConfig, set_config
from apkdl.core.github import GitHubClient


def make_asset(name: str, **overrides) -> dict:
    asset = {
        "name": name,
        "size": 10 * 1024 * 1024,
        "browser_download_url": f"https://github.com/example-org/example-app/releases/download/x/{name}",
        "download_count": 3,
        "created_at": "2024-01-01T10:00:00Z",
        "updated_at": "2024-01-01T10:05:00Z",
    }
    asset.update(overrides)
    return asset


def make_release(tag: str, assets=None, **overrides) -> dict:
    release = {
        "id": abs(hash(tag)) % 100000,
        "name": f"Build {tag}",
        "tag_name": tag,
        "body": "Automated build",
        "published_at": "2024-01-01T12:00:00Z",
        "author": {"login": "octocat"},
        "assets": assets if assets is not None else [],
    }
    release.update(overrides)
    return release


def make_run(run_id: int, **overrides) -> dict:
    run = {
        "id": run_id,
        "name": "Build and Release APK",
        "head_branch": "main",
        "status": "in_progress",
        "conclusion": None,
        "created_at": "2024-01-02T09:00:00Z",
        "updated_at": "2024-01-02T09:10:00Z",
        "display_title": "Fix login screen",
        "actor": {"login": "octocat"},
        "html_url": f"https://github.com/example-org/example-app/actions/runs/{run_id}",
    }
    run.update(overrides)
    return run


@pytest.fixture
def config() -> AppConfig:
    cfg = AppConfig(owner="example-org", repo="example-app")
    set_config(cfg)
    yield cfg
    set_config(None)


@pytest.fixture
def github_client():
    """Build a GitHubClient whose requests are answered by handler."""
    clients = []

    def factory(handler) -> GitHubClient:
        client = GitHubClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
