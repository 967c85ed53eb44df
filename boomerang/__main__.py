"""Command-line entry point for boomerang."""

import asyncio
import logging
import time

import click

from boomerang import __version__
from boomerang.config import Config, ConfigError, Settings
from boomerang.models.report import format_elapsed
from boomerang.services import (
    AuthError,
    FleetConfigurationError,
    InventoryError,
    OutputError,
)
from boomerang.tools.run import perform_run
from boomerang.utils.console import configure_logging

logger = logging.getLogger(__name__)

# Errors that make the whole run meaningless. Anything host-specific is
# recorded in the report instead.
SETUP_ERRORS = (ConfigError, AuthError, InventoryError, FleetConfigurationError, OutputError)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Run configuration file (default: $BOOMERANG_CONFIG or config.yaml).",
)
@click.version_option(
    __version__, "--version", prog_name="boomerang", message="%(prog)s version %(version)s"
)
def main(config_path: str | None) -> None:
    """Execute the configured commands on every inventory host and write a JSON report."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_colors)

    start = time.monotonic()
    try:
        config = Config.load(config_path)
        outcome = asyncio.run(perform_run(config))
    except SETUP_ERRORS as e:
        logger.error("Boomerang error: %s", e)
        raise click.ClickException(str(e)) from e

    elapsed = time.monotonic() - start
    click.echo(
        f"Boomerang completed in {format_elapsed(elapsed)}. "
        f"input: {outcome.hosts_in} output: {outcome.hosts_out}"
    )


if __name__ == "__main__":
    main()
