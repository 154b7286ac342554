"""CLI entry point for apkdl."""

import click

from apkdl import __version__
from apkdl.commands import builds, releases, serve, watch


@click.group()
@click.version_option(version=__version__, prog_name="apkdl")
def main():
    """apkdl - Browse and download APK builds from GitHub releases.

    Run the server, then browse it from the terminal.

    Examples:

        apkdl serve --port 3000

        apkdl releases --branch main

        apkdl archive --page 2

        apkdl watch
    """
    pass


# Register commands
main.add_command(serve.serve)
main.add_command(releases.releases)
main.add_command(releases.archive)
main.add_command(builds.builds)
main.add_command(watch.watch)


if __name__ == "__main__":
    main()
