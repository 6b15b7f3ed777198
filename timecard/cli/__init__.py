# ==============================================================================
# CLI Commands Module
# ==============================================================================
"""
CLI commands for the timecard tool.

Commands are organized into separate modules for maintainability:
- shared.py: Common utilities, constants, and helpers
- render.py: Report rows, tables, CSV and JSON output
- clock.py: Clock in / out / toggle
- status.py: Status command
- report.py: Weekly and daily reports
- config.py: Configuration display
"""

from timecard.cli.shared import (
    # Constants
    PRETTY_TIME,
    REPORT_DATE,
    SLIM_DATETIME,
    # Classes
    Colors,
    Icons,
    # Aliases
    C,
    I,
    # Helpers
    colored_direction,
    fail,
    get_repository,
    get_timezone,
    local,
    parse_offset_option,
    parse_rows_option,
    warn,
)

__all__ = [
    # Constants
    "PRETTY_TIME",
    "REPORT_DATE",
    "SLIM_DATETIME",
    # Classes
    "Colors",
    "Icons",
    # Aliases
    "C",
    "I",
    # Helpers
    "colored_direction",
    "fail",
    "get_repository",
    "get_timezone",
    "local",
    "parse_offset_option",
    "parse_rows_option",
    "warn",
]
