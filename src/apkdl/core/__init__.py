"""Core functionality for apkdl."""
