"""Data models for apkdl."""

from apkdl.models.release import Release, ApkFile
from apkdl.models.build import BuildRun

__all__ = ["Release", "ApkFile", "BuildRun"]
