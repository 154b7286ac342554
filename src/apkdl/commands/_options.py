"""Options shared by the commands that read from a running server."""

import click

api_url_option = click.option(
    "--api-url",
    envvar="APKDL_API_URL",
    default="http://localhost:3000",
    show_default=True,
    help="Base URL of the apkdl server",
)

timezone_option = click.option(
    "--tz",
    "tz_name",
    envvar="APP_DISPLAY_TIMEZONE",
    default="UTC",
    show_default=True,
    help="Timezone for displayed dates",
)

primary_branch_option = click.option(
    "--primary-branch",
    envvar="APP_PRIMARY_BRANCH",
    default="main",
    show_default=True,
    help="Branch pinned first by the 'pinned' sort",
)
