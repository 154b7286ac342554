"""apkdl - browse and download APK builds published as GitHub releases."""

__version__ = "0.1.0"
