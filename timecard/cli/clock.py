# ==============================================================================
# Clock Commands
# ==============================================================================
"""
Clock in / clock out commands for the timecard CLI.

Each command records one entry at the current time, optionally shifted
with ``--offset`` ("15m ago", "in 1h").
"""

from datetime import timedelta
from typing import Annotated, Optional

import typer

from timecard.cli.shared import (
    SLIM_DATETIME,
    C,
    I,
    colored_direction,
    fail,
    get_repository,
    get_timezone,
    local,
    parse_offset_option,
)
from timecard.clock import record_entry, resolve_instant, toggle_entry
from timecard.core.errors import TimecardError
from timecard.core.models import Direction, Event
from timecard.utils.durations import format_offset

OffsetOption = Annotated[
    Optional[str],
    typer.Option(
        "--offset",
        "-o",
        help="Shift the entry from now, e.g. '15m ago' or 'in 1h 30m'",
    ),
]


# ==============================================================================
# Helper Functions
# ==============================================================================


def _print_recorded(event: Event, offset: timedelta | None) -> None:
    when = local(event.timestamp, get_timezone())
    message = (
        f"{C.BRIGHT_GREEN}{I.CHECK}{C.RESET} Clocked {colored_direction(event.direction.value)} "
        f"at {when.strftime(SLIM_DATETIME)}"
    )
    if offset:
        message += f" {C.DIM}({format_offset(offset)}){C.RESET}"
    print(message)


def _record(direction: Direction | None, offset: Optional[str]) -> None:
    delta = parse_offset_option(offset)
    at = resolve_instant(delta)
    repository = get_repository()
    try:
        if direction is None:
            event = toggle_entry(repository, at)
        else:
            event = record_entry(repository, direction, at)
    except TimecardError as e:
        fail(str(e))
    _print_recorded(event, delta)


# ==============================================================================
# Commands
# ==============================================================================


def clock_in(offset: OffsetOption = None) -> None:
    """Clock in.

    Examples:
        timecard clock in
        timecard clock in --offset "10m ago"
    """
    _record(Direction.CLOCK_IN, offset)


def clock_out(offset: OffsetOption = None) -> None:
    """Clock out.

    Examples:
        timecard clock out
        timecard clock out -o "in 15m"
    """
    _record(Direction.CLOCK_OUT, offset)


def clock_toggle(offset: OffsetOption = None) -> None:
    """Clock out if clocked in, otherwise clock in."""
    _record(None, offset)
