# ==============================================================================
# Duration Parsing and Formatting
# ==============================================================================
"""
Human-friendly durations for the CLI.

Provides:
- parse_offset(): "1h 30m", "in 1h 30m", "1h 30m ago" -> signed timedelta
- format_duration(): rounded ("8h 05m") or exact ("8h 4m 31s") display
- format_offset(): signed timedelta -> "in 1h 30m" / "1h 30m ago"

Totals are only rounded here, at display time.
"""

import re
from datetime import timedelta

MICROSECONDS_PER_SECOND = 1_000_000
MICROSECONDS_PER_MINUTE = 60 * MICROSECONDS_PER_SECOND

_TOKEN_PATTERN = re.compile(r"(\d+)\s*([a-zA-Zµ]+)")

_NS = {
    "ns": 1,
    "us": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
    "d": 86400 * 1_000_000_000,
    "w": 7 * 86400 * 1_000_000_000,
}

# Unit spellings, in nanoseconds
_UNITS = {
    "nsec": _NS["ns"],
    "ns": _NS["ns"],
    "usec": _NS["us"],
    "us": _NS["us"],
    "µs": _NS["us"],
    "msec": _NS["ms"],
    "ms": _NS["ms"],
    "seconds": _NS["s"],
    "second": _NS["s"],
    "secs": _NS["s"],
    "sec": _NS["s"],
    "s": _NS["s"],
    "minutes": _NS["m"],
    "minute": _NS["m"],
    "mins": _NS["m"],
    "min": _NS["m"],
    "m": _NS["m"],
    "hours": _NS["h"],
    "hour": _NS["h"],
    "hrs": _NS["h"],
    "hr": _NS["h"],
    "h": _NS["h"],
    "days": _NS["d"],
    "day": _NS["d"],
    "d": _NS["d"],
    "weeks": _NS["w"],
    "week": _NS["w"],
    "w": _NS["w"],
}


class DurationParseError(ValueError):
    """An offset string could not be parsed."""


def parse_duration(text: str) -> timedelta:
    """
    Parse an unsigned duration such as "1h 30m" or "2days 4h".

    Raises:
        DurationParseError: On empty input, unknown units or stray text
    """
    body = text.strip()
    if not body:
        raise DurationParseError("Empty duration")

    nanoseconds = 0
    position = 0
    for match in _TOKEN_PATTERN.finditer(body):
        if body[position : match.start()].strip():
            raise DurationParseError(f"Invalid duration: {text!r}")
        unit = match.group(2)
        if unit not in _UNITS:
            raise DurationParseError(f"Unknown time unit {unit!r} in {text!r}")
        nanoseconds += int(match.group(1)) * _UNITS[unit]
        position = match.end()

    if position == 0 or body[position:].strip():
        raise DurationParseError(f"Invalid duration: {text!r}")
    return timedelta(microseconds=nanoseconds // 1_000)


def parse_offset(text: str) -> timedelta:
    """
    Parse a signed offset from now.

    Accepts:
    - "in 1h 30m" -> forward
    - "1h 30m" -> forward
    - "1h 30m ago" -> backward

    Raises:
        DurationParseError: If both directions are given or the duration is invalid
    """
    parts = text.split()
    if not parts:
        raise DurationParseError(f"Invalid direction: {text!r}")

    forward = parts[0] == "in"
    backward = parts[-1] == "ago"
    if forward and backward:
        raise DurationParseError("Both forward and backward directions specified")
    if forward:
        parts = parts[1:]
    elif backward:
        parts = parts[:-1]

    duration = parse_duration(" ".join(parts))
    return -duration if backward else duration


def _split_units(value: timedelta) -> tuple[int, int, int]:
    total_seconds = (value // timedelta(microseconds=1)) // MICROSECONDS_PER_SECOND
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return hours, minutes, seconds


def round_to_minutes(value: timedelta) -> int:
    """Whole minutes, rounding half a minute up."""
    microseconds = value // timedelta(microseconds=1)
    return (microseconds + MICROSECONDS_PER_MINUTE // 2) // MICROSECONDS_PER_MINUTE


def format_duration(value: timedelta, exact: bool = False) -> str:
    """
    Format a duration for display.

    Rounded: nearest minute, "8h 05m". Exact: every non-zero unit down to
    seconds, "8h 4m 31s" (sub-second remainder dropped).
    """
    sign = "-" if value < timedelta(0) else ""
    value = abs(value)

    if not exact:
        hours, minutes = divmod(round_to_minutes(value), 60)
        return f"{sign}{hours}h {minutes:02d}m"

    hours, minutes, seconds = _split_units(value)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return sign + " ".join(parts)


def format_offset(value: timedelta) -> str:
    """Relative description of a signed offset: "in 1h 30m" or "1h 30m ago"."""
    text = format_duration(abs(value), exact=True)
    if value < timedelta(0):
        return f"{text} ago"
    return f"in {text}"
