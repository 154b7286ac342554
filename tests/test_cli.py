import httpx
import pytest
from click.testing import CliRunner
from rich.console import Console

from apkdl.cli import main
from apkdl.commands import builds as builds_cmd
from apkdl.commands import releases as releases_cmd
from apkdl.commands import watch as watch_cmd
from apkdl.core.api import ApiClient, ApiError
from apkdl.core.presenter import ViewState

RELEASES = [
    {
        "id": 1,
        "name": "Main build",
        "tag": "apk-main",
        "branch": "main",
        "description": "",
        "publishedAt": "2024-01-01T00:00:00Z",
        "author": "octocat",
        "apkFiles": [
            {
                "name": f"app-main-202401{day:02d}-120000.apk",
                "size": 1048576,
                "downloadUrl": f"https://example.com/{day}.apk",
                "downloadCount": 0,
            }
            for day in range(1, 6)
        ],
    },
    {
        "id": 2,
        "name": "Feature build",
        "tag": "apk-feature",
        "branch": "feature",
        "description": "",
        "publishedAt": "2024-02-01T00:00:00Z",
        "author": "octocat",
        "apkFiles": [],
    },
]

ACTIVE = [
    {
        "id": 9,
        "branch": "feature",
        "status": "in_progress",
        "startedAt": "2024-01-02T09:00:00Z",
        "commitMessage": "APK Build from branch: feature",
        "author": "octocat",
        "url": "https://github.com/example-org/example-app/actions/runs/9",
    }
]


def api_handler(releases_ok=True, active=None):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/config":
            return httpx.Response(200, json={"name": "SafeTransit", "description": "Nightly"})
        if path == "/api/releases":
            if not releases_ok:
                return httpx.Response(
                    500,
                    json={"success": False, "error": "Failed to fetch releases", "message": "boom"},
                )
            return httpx.Response(200, json={"success": True, "releases": RELEASES})
        if path == "/api/builds/active":
            return httpx.Response(200, json={"success": True, "builds": active or []})
        if path == "/api/builds/recent":
            return httpx.Response(200, json={"success": False, "builds": []})
        return httpx.Response(404)

    return handler


@pytest.fixture
def fake_api(monkeypatch):
    def install(handler):
        def factory(base_url):
            return ApiClient(base_url, transport=httpx.MockTransport(handler))

        for module in (releases_cmd, builds_cmd, watch_cmd):
            monkeypatch.setattr(module, "ApiClient", factory)
            monkeypatch.setattr(module, "console", Console(width=200))

    return install


def test_releases_command(fake_api):
    fake_api(api_handler())

    result = CliRunner().invoke(main, ["releases", "--sort", "pinned"])

    assert result.exit_code == 0, result.output
    assert "SafeTransit" in result.output
    assert "Latest" in result.output
    assert "app-main-20240105-120000.apk" in result.output
    assert "Older Builds (4)" in result.output
    assert "No APK files available" in result.output


def test_releases_command_branch_without_matches(fake_api):
    fake_api(api_handler())

    result = CliRunner().invoke(main, ["releases", "--branch", "nope"])

    assert result.exit_code == 0
    assert "No releases match your filters" in result.output


def test_releases_command_fails_on_server_error(fake_api):
    fake_api(api_handler(releases_ok=False))

    result = CliRunner().invoke(main, ["releases"])

    assert result.exit_code == 1
    assert "boom" in result.output


def test_archive_command_pages(fake_api):
    fake_api(api_handler())

    result = CliRunner().invoke(main, ["archive", "--branch", "main", "--page", "2"])

    assert result.exit_code == 0, result.output
    assert "All available versions" in result.output
    assert "Showing 4-5" in result.output
    assert "Page 2 of 2" in result.output


def test_builds_command_degrades_to_empty(fake_api):
    fake_api(api_handler())

    result = CliRunner().invoke(main, ["builds", "--recent"])

    assert result.exit_code == 0
    assert "No recent builds" in result.output


class RecordingPoller:
    def __init__(self):
        self.scheduled = 0
        self.stopped = 0

    def schedule(self):
        self.scheduled += 1

    def stop(self):
        self.stopped += 1


def test_watcher_reschedules_while_builds_run():
    poller = RecordingPoller()
    api = ApiClient("http://apkdl.test", transport=httpx.MockTransport(api_handler(active=ACTIVE)))
    watcher = watch_cmd.BuildWatcher(api, ViewState(), poller=poller)

    watcher.refresh()

    assert poller.scheduled == 1
    assert not watcher.finished.is_set()
    assert len(watcher.state.releases) == 2


def test_watcher_stops_when_no_build_runs():
    poller = RecordingPoller()
    api = ApiClient("http://apkdl.test", transport=httpx.MockTransport(api_handler()))
    watcher = watch_cmd.BuildWatcher(api, ViewState(), poller=poller)

    watcher.refresh()

    assert poller.scheduled == 0
    assert poller.stopped == 1
    assert watcher.finished.is_set()


def test_watcher_finishes_when_build_status_turns_malformed():
    polls = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/builds/active":
            polls.append(request)
            builds = ACTIVE if len(polls) == 1 else [{"branch": "main"}]
            return httpx.Response(200, json={"success": True, "builds": builds})
        return api_handler()(request)

    poller = RecordingPoller()
    api = ApiClient("http://apkdl.test", transport=httpx.MockTransport(handler))
    watcher = watch_cmd.BuildWatcher(api, ViewState(), poller=poller)

    watcher.refresh()
    watcher.refresh()

    assert poller.scheduled == 1
    assert watcher.finished.is_set()
    assert watcher.error is None


def test_api_client_rejects_malformed_release():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "releases": [{"name": "no tag"}]})

    api = ApiClient("http://apkdl.test", transport=httpx.MockTransport(handler))

    with pytest.raises(ApiError, match="Malformed release"):
        api.get_releases()


class BrokenApi:
    def get_active_builds(self):
        raise RuntimeError("socket closed")


def test_watcher_finishes_on_unexpected_error():
    poller = RecordingPoller()
    watcher = watch_cmd.BuildWatcher(BrokenApi(), ViewState(), poller=poller)

    watcher.refresh()

    assert watcher.finished.is_set()
    assert poller.stopped == 1
    assert isinstance(watcher.error, RuntimeError)


def test_watch_command_fails_on_unexpected_error(fake_api, monkeypatch):
    fake_api(api_handler())
    monkeypatch.setattr(ApiClient, "get_active_builds", BrokenApi.get_active_builds)

    result = CliRunner().invoke(main, ["watch"])

    assert result.exit_code == 1
    assert "socket closed" in result.output


def test_watch_command_exits_without_active_builds(fake_api):
    fake_api(api_handler())

    result = CliRunner().invoke(main, ["watch"])

    assert result.exit_code == 0, result.output
    assert "No builds running" in result.output
