"""Client for the apkdl HTTP API, used by the terminal views."""

import logging

import httpx

from apkdl.models.build import BuildRun
from apkdl.models.release import Release

logger = logging.getLogger(__name__)

MALFORMED_ENTRY = (KeyError, TypeError, ValueError, AttributeError)


class ApiError(Exception):
    """The apkdl server could not provide the requested data."""

    pass


class ApiClient:
    """Talks to a running `apkdl serve` instance."""

    def __init__(self, base_url: str, transport: httpx.BaseTransport | None = None):
        self.client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.client.close()

    def _get(self, path: str) -> dict:
        try:
            response = self.client.get(path)
            data = response.json()
        except httpx.HTTPError as e:
            raise ApiError(f"Could not reach {self.client.base_url}: {e}") from e
        except ValueError as e:
            raise ApiError(f"Invalid response from {path}") from e
        if not isinstance(data, dict):
            raise ApiError(f"Invalid response from {path}")
        return data

    def get_app_info(self) -> dict:
        """Get the app name and description."""
        return self._get("/api/config")

    def get_releases(self) -> list[Release]:
        """Get releases. Raises ApiError when the server reports a failure."""
        data = self._get("/api/releases")
        if not data.get("success"):
            raise ApiError(data.get("message") or "Failed to load releases")
        try:
            return [Release.from_dict(r) for r in data.get("releases", [])]
        except MALFORMED_ENTRY as e:
            raise ApiError(f"Malformed release in server response: {e!r}") from e

    def _get_builds(self, path: str) -> list[BuildRun]:
        try:
            data = self._get(path)
        except ApiError as e:
            logger.warning("Build status unavailable: %s", e)
            return []
        if not data.get("success"):
            return []
        try:
            return [BuildRun.from_dict(b) for b in data.get("builds", [])]
        except MALFORMED_ENTRY as e:
            logger.warning("Ignoring malformed build status from %s: %r", path, e)
            return []

    def get_active_builds(self) -> list[BuildRun]:
        """Get running builds. Failures degrade to an empty list."""
        return self._get_builds("/api/builds/active")

    def get_recent_builds(self) -> list[BuildRun]:
        return self._get_builds("/api/builds/recent")
