"""Configuration for the apkdl server."""

from pathlib import Path
from dataclasses import dataclass
import os

import yaml


DEFAULT_CONFIG_FILE = "config.yaml"


class ConfigError(Exception):
    """Configuration is missing or invalid."""

    pass


@dataclass
class AppConfig:
    """Settings for the API server."""

    owner: str
    repo: str
    token: str = ""
    name: str = "APK Downloader"
    description: str = "Download APKs"
    tag_pattern: str = "apk-"
    artifact_suffix: str = ".apk"
    workflow_name: str = "Build and Release APK"
    static_dir: Path | None = None
    port: int = 3000

    @classmethod
    def from_env(cls, env: dict | None = None) -> "AppConfig":
        """Create config from environment variables."""
        env = os.environ if env is None else env
        static_dir = env.get("APP_STATIC_DIR")
        return cls(
            owner=env["GITHUB_OWNER"],
            repo=env["GITHUB_REPO"],
            token=env.get("GITHUB_TOKEN", ""),
            name=env.get("APP_NAME", cls.name),
            description=env.get("APP_DESCRIPTION", cls.description),
            tag_pattern=env.get("APP_TAG_PATTERN", cls.tag_pattern),
            artifact_suffix=env.get("APP_ARTIFACT_SUFFIX", cls.artifact_suffix),
            workflow_name=env.get("APP_WORKFLOW_NAME", cls.workflow_name),
            static_dir=Path(static_dir) if static_dir else None,
            port=_parse_port(env.get("PORT", cls.port)),
        )

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        """Create config from a YAML file with github/app/server sections."""
        if not path.exists():
            raise ConfigError(
                f"No configuration found: set GITHUB_OWNER and GITHUB_REPO or create {path}"
            )

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        github = data.get("github") or {}
        app = data.get("app") or {}
        server = data.get("server") or {}

        if not github.get("owner") or not github.get("repo"):
            raise ConfigError(f"{path}: github.owner and github.repo are required")

        static_dir = server.get("static_dir")
        return cls(
            owner=github["owner"],
            repo=github["repo"],
            token=github.get("token") or "",
            name=app.get("name", cls.name),
            description=app.get("description", cls.description),
            tag_pattern=app.get("tagPattern", cls.tag_pattern),
            artifact_suffix=app.get("artifactSuffix", cls.artifact_suffix),
            workflow_name=app.get("workflowName", cls.workflow_name),
            static_dir=Path(static_dir) if static_dir else None,
            port=_parse_port(server.get("port", cls.port)),
        )

    @classmethod
    def load(cls, env: dict | None = None) -> "AppConfig":
        """Load config from the environment, falling back to a YAML file."""
        env = os.environ if env is None else env
        if env.get("GITHUB_OWNER") and env.get("GITHUB_REPO"):
            return cls.from_env(env)
        return cls.from_file(Path(env.get("APKDL_CONFIG", DEFAULT_CONFIG_FILE)))

    @property
    def repo_slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def public_app_info(self) -> dict:
        """App settings exposed to the frontend."""
        return {
            "name": self.name,
            "description": self.description,
            "tagPattern": self.tag_pattern,
        }


def _parse_port(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid port: {value!r}")


# Global config instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config


def set_config(config: AppConfig | None) -> None:
    """Set a custom configuration (useful for testing)."""
    global _config
    _config = config
