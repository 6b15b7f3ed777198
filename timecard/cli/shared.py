# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and status icons
- Event store and timezone helpers bound to the current settings
- Option parsers shared by several commands
- Message helpers for success/failure output
"""

from datetime import datetime, timedelta, tzinfo
from typing import NoReturn

import typer

from timecard.infrastructure.repositories import CsvEventRepository
from timecard.utils.config import get_settings
from timecard.utils.durations import DurationParseError, parse_offset

# ==============================================================================
# Constants
# ==============================================================================

PRETTY_TIME = "%I:%M:%S %p"
SLIM_DATETIME = "%I:%M:%S %p %d %B %Y"
REPORT_DATE = "%d %B %Y"


# ==============================================================================
# ANSI Colors and Icons
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    # Colors
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"

    # Bright colors
    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"
    BRIGHT_BLUE = "\033[94m"
    BRIGHT_MAGENTA = "\033[95m"
    BRIGHT_CYAN = "\033[96m"


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    WARN = "!"
    CIRCLE = "●"
    ARROW = "→"


# Module-level aliases for convenience
C, I = Colors, Icons


# ==============================================================================
# Settings-bound Helpers
# ==============================================================================


def get_repository() -> CsvEventRepository:
    """Event store at the configured data file."""
    return CsvEventRepository(get_settings().data_file)


def get_timezone() -> tzinfo:
    """Configured report timezone, exiting with an error when unknown."""
    try:
        return get_settings().get_timezone()
    except ValueError as e:
        fail(str(e))


def local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert an instant to the report timezone for display."""
    return value.astimezone(tz or get_timezone())


def colored_direction(direction: str) -> str:
    """'in' in green, 'out' in red."""
    color = C.BRIGHT_GREEN if direction == "in" else C.BRIGHT_RED
    return f"{color}{C.BOLD}{direction}{C.RESET}"


# ==============================================================================
# Option Parsers
# ==============================================================================


def parse_offset_option(value: str | None) -> timedelta | None:
    """Parse ``--offset`` into a signed timedelta, or None when not given."""
    if value is None:
        return None
    try:
        return parse_offset(value)
    except DurationParseError as e:
        raise typer.BadParameter(str(e))


def parse_rows_option(value: str | None, default: int) -> int | None:
    """
    Parse ``--rows``: a positive count or "all".

    Returns:
        Row count, or None for every row

    Raises:
        typer.BadParameter: For zero, negative or non-numeric values
    """
    if value is None:
        return default
    text = value.strip().lower()
    if text == "all":
        return None
    if not text.isdigit() or int(text) == 0:
        raise typer.BadParameter(f"Expected a positive number of rows or 'all', got {value!r}")
    return int(text)


# ==============================================================================
# Messages
# ==============================================================================


def fail(message: str) -> NoReturn:
    """Print an error line and exit with status 1."""
    print(f"{C.BRIGHT_RED}{I.CROSS} {message}{C.RESET}")
    raise typer.Exit(1)


def warn(message: str) -> None:
    print(f"{C.BRIGHT_YELLOW}{I.WARN} {message}{C.RESET}")
