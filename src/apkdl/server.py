"""HTTP API serving reshaped release and build data to the frontend."""

import logging
from typing import Iterator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from apkdl import __version__
from apkdl.core import aggregator
from apkdl.core.config import AppConfig, get_config
from apkdl.core.github import GitHubClient, FetchError

logger = logging.getLogger(__name__)


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_github_client(
    config: AppConfig = Depends(get_app_config),
) -> Iterator[GitHubClient]:
    with GitHubClient(token=config.token) as client:
        yield client


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API application."""
    config = config or get_config()

    app = FastAPI(title=config.name, version=__version__)
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/releases")
    def releases(
        config: AppConfig = Depends(get_app_config),
        client: GitHubClient = Depends(get_github_client),
    ):
        try:
            items = aggregator.get_releases(client, config)
        except FetchError as e:
            logger.error("Error fetching releases: %s", e)
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "error": "Failed to fetch releases",
                    "message": str(e),
                },
            )

        return {
            "success": True,
            "app": config.public_app_info(),
            "releases": [release.to_dict() for release in items],
        }

    @app.get("/api/config")
    def app_config(config: AppConfig = Depends(get_app_config)):
        return {"name": config.name, "description": config.description}

    # Build status is auxiliary: upstream failures degrade to an empty list.
    @app.get("/api/builds/active")
    def active_builds(
        config: AppConfig = Depends(get_app_config),
        client: GitHubClient = Depends(get_github_client),
    ):
        try:
            builds = aggregator.get_active_builds(client, config)
        except FetchError as e:
            logger.error("Error fetching active builds: %s", e)
            return {"success": False, "builds": []}
        return {"success": True, "builds": [b.to_dict() for b in builds]}

    @app.get("/api/builds/recent")
    def recent_builds(
        config: AppConfig = Depends(get_app_config),
        client: GitHubClient = Depends(get_github_client),
    ):
        try:
            builds = aggregator.get_recent_builds(client, config)
        except FetchError as e:
            logger.error("Error fetching recent builds: %s", e)
            return {"success": False, "builds": []}
        return {"success": True, "builds": [b.to_dict() for b in builds]}

    if config.static_dir and config.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")

    return app
