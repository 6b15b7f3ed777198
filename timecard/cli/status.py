# ==============================================================================
# Status Command
# ==============================================================================
"""
Status command for the timecard CLI.

Shows whether you are clocked in or out, since when, and the hours of
the session in progress. Supports a ``--json`` mode for scripting.
"""

import json as json_module
from datetime import datetime
from typing import Annotated, Any, Optional

import typer

from timecard.cli.clock import OffsetOption
from timecard.cli.shared import (
    SLIM_DATETIME,
    C,
    I,
    fail,
    get_repository,
    get_timezone,
    local,
    parse_offset_option,
)
from timecard.clock import current_status, resolve_instant
from timecard.core.errors import TimecardError
from timecard.core.status import ClockStatus
from timecard.utils.durations import format_duration


def _status_data(status: ClockStatus) -> dict[str, Any]:
    def iso(value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None

    return {
        "at": iso(status.at),
        "clocked_in": status.is_clocked_in,
        "direction": status.direction.value if status.direction else None,
        "since": iso(status.since),
        "until": iso(status.until),
    }


def show_status(
    offset: OffsetOption = None,
    json_output: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show whether you are clocked in or out.

    Examples:
        timecard status
        timecard status --offset "2h ago"
        timecard status --json
    """
    at = resolve_instant(parse_offset_option(offset))
    try:
        status = current_status(get_repository(), at)
    except TimecardError as e:
        fail(str(e))

    if json_output:
        print(json_module.dumps(_status_data(status)))
        return

    tz = get_timezone()
    if status.direction is None:
        print(f"{C.DIM}{I.CIRCLE}{C.RESET} Clocked {C.BRIGHT_RED}{C.BOLD}out{C.RESET}")
        print(f"  {C.DIM}No entries recorded before this time{C.RESET}")
    else:
        color = C.BRIGHT_GREEN if status.is_clocked_in else C.BRIGHT_RED
        print(f"{color}{I.CIRCLE}{C.RESET} Clocked {color}{C.BOLD}{status.direction.value}{C.RESET}")
        print(f"  {C.BOLD}Since:{C.RESET} {local(status.since, tz).strftime(SLIM_DATETIME)}")
        if status.is_clocked_in and status.until is None:
            print(f"  {C.BOLD}Worked:{C.RESET} {format_duration(at - status.since)}")

    if status.until is not None:
        print(f"  {C.BOLD}Until:{C.RESET} {local(status.until, tz).strftime(SLIM_DATETIME)}")
