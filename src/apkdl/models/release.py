"""Release and artifact data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


NO_DESCRIPTION = "No description available"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp. Returns None for empty or bad values."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def strip_tag_prefix(tag: str, prefix: str) -> str:
    """Remove prefix from the start of tag, once."""
    if prefix and tag.startswith(prefix):
        return tag[len(prefix):]
    return tag


@dataclass
class ApkFile:
    """A downloadable build artifact attached to a release."""

    name: str
    size: int
    download_url: str
    download_count: int = 0
    uploaded_at: str | None = None

    @classmethod
    def from_api_response(cls, data: dict) -> "ApkFile":
        """Create ApkFile from a GitHub release asset."""
        return cls(
            name=data["name"],
            size=int(data.get("size") or 0),
            download_url=data["browser_download_url"],
            download_count=int(data.get("download_count") or 0),
            uploaded_at=data.get("created_at") or data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "size": self.size,
            "downloadUrl": self.download_url,
            "downloadCount": self.download_count,
        }
        if self.uploaded_at:
            data["uploadedAt"] = self.uploaded_at
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ApkFile":
        return cls(
            name=data["name"],
            size=int(data.get("size") or 0),
            download_url=data["downloadUrl"],
            download_count=int(data.get("downloadCount") or 0),
            uploaded_at=data.get("uploadedAt"),
        )


@dataclass
class Release:
    """A tagged release carrying APK artifacts for one branch."""

    id: int
    name: str
    tag: str
    branch: str
    description: str
    published_at: str
    author: str
    apk_files: list[ApkFile] = field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict, tag_prefix: str = "", artifact_suffix: str = ".apk"
    ) -> "Release":
        """Create Release from a GitHub release.

        Only assets whose name ends with artifact_suffix are kept, and the
        branch is the tag with tag_prefix removed.
        """
        tag = data["tag_name"]
        assets = data.get("assets") or []
        author = data.get("author") or {}
        return cls(
            id=data["id"],
            name=data.get("name") or tag,
            tag=tag,
            branch=strip_tag_prefix(tag, tag_prefix),
            description=data.get("body") or NO_DESCRIPTION,
            published_at=data.get("published_at") or "",
            author=author.get("login", ""),
            apk_files=[
                ApkFile.from_api_response(a)
                for a in assets
                if a["name"].endswith(artifact_suffix)
            ],
        )

    def to_dict(self) -> dict:
        """Convert to the JSON shape served by the API."""
        return {
            "id": self.id,
            "name": self.name,
            "tag": self.tag,
            "branch": self.branch,
            "description": self.description,
            "publishedAt": self.published_at,
            "author": self.author,
            "apkFiles": [apk.to_dict() for apk in self.apk_files],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Release":
        """Create Release from the JSON shape served by the API."""
        return cls(
            id=data["id"],
            name=data.get("name") or data["tag"],
            tag=data["tag"],
            branch=data.get("branch", ""),
            description=data.get("description") or NO_DESCRIPTION,
            published_at=data.get("publishedAt") or "",
            author=data.get("author", ""),
            apk_files=[ApkFile.from_dict(a) for a in data.get("apkFiles", [])],
        )

    @property
    def published(self) -> datetime | None:
        return parse_timestamp(self.published_at)

    @property
    def key(self) -> str:
        """Stable identifier for per-release view state."""
        return "".join(c if c.isalnum() else "_" for c in self.tag)
