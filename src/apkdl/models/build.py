"""Workflow run data model."""

import re
from dataclasses import dataclass

from apkdl.models.release import parse_timestamp


BRANCH_TITLE_PATTERN = re.compile(r"APK Build from branch:\s*(.+)")


def recover_branch(title: str | None, fallback: str | None) -> str:
    """Get the source branch of a run.

    Builds triggered for another branch carry it in their title
    ("APK Build from branch: feature/x"); otherwise the run's own
    head branch is used.
    """
    if title:
        match = BRANCH_TITLE_PATTERN.search(title)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return fallback or ""


@dataclass
class BuildRun:
    """One execution of the build workflow."""

    id: int
    branch: str
    status: str
    started_at: str
    commit_message: str
    author: str
    url: str
    conclusion: str | None = None
    completed_at: str | None = None
    duration: int | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "BuildRun":
        """Create BuildRun from a GitHub workflow run."""
        title = data.get("display_title") or ""
        status = data["status"]
        started_at = data.get("created_at") or ""
        completed_at = data.get("updated_at") if status == "completed" else None

        duration = None
        start = parse_timestamp(started_at)
        end = parse_timestamp(completed_at)
        if start and end:
            duration = int((end - start).total_seconds())

        actor = data.get("actor") or {}
        return cls(
            id=data["id"],
            branch=recover_branch(title, data.get("head_branch")),
            status=status,
            conclusion=data.get("conclusion"),
            started_at=started_at,
            completed_at=completed_at,
            duration=duration,
            commit_message=title,
            author=actor.get("login", ""),
            url=data.get("html_url", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "branch": self.branch,
            "status": self.status,
            "conclusion": self.conclusion,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "duration": self.duration,
            "commitMessage": self.commit_message,
            "author": self.author,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BuildRun":
        return cls(
            id=data["id"],
            branch=data.get("branch", ""),
            status=data.get("status", ""),
            conclusion=data.get("conclusion"),
            started_at=data.get("startedAt") or "",
            completed_at=data.get("completedAt"),
            duration=data.get("duration"),
            commit_message=data.get("commitMessage", ""),
            author=data.get("author", ""),
            url=data.get("url", ""),
        )
