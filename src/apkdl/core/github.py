"""GitHub API client for fetching releases and workflow runs."""

import httpx


GITHUB_API_BASE = "https://api.github.com"


class FetchError(Exception):
    """Error fetching data from the GitHub API."""

    pass


class GitHubClient:
    """Read-only client for the releases and actions endpoints."""

    def __init__(
        self,
        token: str = "",
        base_url: str = GITHUB_API_BASE,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.client.close()

    def close(self) -> None:
        self.client.close()

    def _get_json(self, path: str, owner: str, repo: str, params: dict | None = None):
        try:
            response = self.client.get(path, params=params)
        except httpx.HTTPError as e:
            raise FetchError(f"Request to GitHub failed: {e}") from e

        if response.status_code == 404:
            raise FetchError(f"Repository {owner}/{repo} not found")
        if response.status_code in (403, 429):
            raise FetchError("GitHub API rate limit exceeded")
        if response.is_error:
            raise FetchError(
                f"GitHub API returned HTTP {response.status_code} for {path}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from GitHub for {path}") from e

    def get_releases(self, owner: str, repo: str, per_page: int | None = None) -> list[dict]:
        """Get raw releases for a repository."""
        params = {"per_page": per_page} if per_page else None
        data = self._get_json(f"/repos/{owner}/{repo}/releases", owner, repo, params)
        if not isinstance(data, list):
            raise FetchError("Unexpected releases payload from GitHub")
        return data

    def get_workflow_runs(
        self,
        owner: str,
        repo: str,
        status: str | None = None,
        per_page: int | None = None,
    ) -> list[dict]:
        """Get raw workflow runs, optionally filtered by status."""
        params = {}
        if status:
            params["status"] = status
        if per_page:
            params["per_page"] = per_page

        data = self._get_json(
            f"/repos/{owner}/{repo}/actions/runs", owner, repo, params or None
        )
        runs = data.get("workflow_runs") if isinstance(data, dict) else None
        if not isinstance(runs, list):
            raise FetchError("Unexpected workflow runs payload from GitHub")
        return runs
