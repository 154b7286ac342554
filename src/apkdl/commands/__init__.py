"""CLI commands for apkdl."""
