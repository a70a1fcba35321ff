"""hookguard CLI main entry point.

This module provides the main CLI interface for hookguard.
"""

import click

from hookguard import __version__
from hookguard.config import settings
from hookguard.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="hookguard")
def cli() -> None:
    """hookguard - security and secret-scanning hooks.

    Each package installs managed handlers into an agent settings file and
    runs as that handler on every tool call.
    """
    configure_logging(settings.log_level, settings.log_format)


# Import and register subcommands
from hookguard.cli.packages import secrets, security  # noqa: E402

cli.add_command(security)
cli.add_command(secrets)
