# ==============================================================================
# Timecard Utilities
# ==============================================================================
"""
Shared utilities for the timecard CLI.

This module exports configuration, duration and month helpers.
"""

from timecard.utils.config import (
    ReportSettings,
    Settings,
    detect_local_timezone,
    get_settings,
    load_timezone,
)
from timecard.utils.durations import (
    DurationParseError,
    format_duration,
    format_offset,
    parse_duration,
    parse_offset,
)
from timecard.utils.months import month_label, month_window, parse_month

__all__ = [
    # Config
    "ReportSettings",
    "Settings",
    "detect_local_timezone",
    "get_settings",
    "load_timezone",
    # Durations
    "DurationParseError",
    "format_duration",
    "format_offset",
    "parse_duration",
    "parse_offset",
    # Months
    "month_label",
    "month_window",
    "parse_month",
]
