# ==============================================================================
# Timecard CLI
# ==============================================================================
"""
Command-line interface for tracking and reporting hours worked.

Usage:
    timecard --help
    timecard status
    timecard clock in
    timecard clock out --offset "10m ago"
    timecard clock toggle
    timecard report weekly --month previous
    timecard report daily --exact
    timecard config show
"""

import logging
import os
from typing import Annotated

import typer

from timecard.utils.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ==============================================================================
# App Configuration
# ==============================================================================
# Set consistent terminal width for help output formatting
if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="timecard",
    help="Track clock in / clock out entries and report hours worked",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def configure(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Track clock in / clock out entries and report hours worked."""
    level_name = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
    )


clock_app = typer.Typer(
    help="Record clock entries",
    no_args_is_help=True,
)
app.add_typer(clock_app, name="clock")

# Register clock commands from cli.clock module
from timecard.cli.clock import clock_in, clock_out, clock_toggle

clock_app.command("in")(clock_in)
clock_app.command("out")(clock_out)
clock_app.command("toggle")(clock_toggle)

report_app = typer.Typer(
    help="Hours worked reports",
    no_args_is_help=True,
)
app.add_typer(report_app, name="report")

# Register report commands from cli.report module
from timecard.cli.report import report_daily, report_weekly

report_app.command("weekly")(report_weekly)
report_app.command("daily")(report_daily)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

# Register config commands from cli.config module
from timecard.cli.config import config_show

config_app.command("show")(config_show)


# Status command is imported from timecard.cli.status
from timecard.cli.status import show_status

app.command("status")(show_status)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
