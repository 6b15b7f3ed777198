# ==============================================================================
# Month Selection
# ==============================================================================
"""
Parses the ``--month`` option of the weekly report into a local time window.

Accepts a month name ("January", "jan"), a number (1-12), or one of
"current", "previous", "next" and "all". Named and numbered months refer
to the current year.
"""

from datetime import date, datetime, time, tzinfo

RELATIVE_MONTHS = ("current", "previous", "next", "all")

_MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)


def _shift(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def parse_month(value: str) -> str | int:
    """
    Normalize a month argument.

    Returns:
        One of the relative keywords, or a month number 1-12

    Raises:
        ValueError: For out-of-range numbers or unknown names
    """
    text = value.strip().lower()
    if text.isdigit():
        number = int(text)
        if not 1 <= number <= 12:
            raise ValueError(f"Month {number} is not a valid month number")
        return number
    if text in RELATIVE_MONTHS:
        return text
    for number, name in enumerate(_MONTH_NAMES, start=1):
        if text == name or (len(text) >= 3 and name.startswith(text)):
            return number
    raise ValueError(
        f"Unknown month {value}. Expected a month number, name, "
        "or 'current', 'previous', 'next' or 'all'"
    )


def month_window(
    value: str, now: datetime, tz: tzinfo
) -> tuple[datetime, datetime] | None:
    """
    Local ``[start, end)`` window for a month argument.

    Args:
        value: Raw ``--month`` value
        now: Reference instant for relative months and the current year
        tz: Target timezone

    Returns:
        (first midnight of the month, first midnight of the next month),
        or None for "all"
    """
    month = parse_month(value)
    if month == "all":
        return None

    today = now.astimezone(tz).date()
    if month == "current":
        year, number = today.year, today.month
    elif month == "previous":
        year, number = _shift(today.year, today.month, -1)
    elif month == "next":
        year, number = _shift(today.year, today.month, 1)
    else:
        year, number = today.year, month

    next_year, next_number = _shift(year, number, 1)
    return (
        datetime.combine(date(year, number, 1), time.min, tzinfo=tz),
        datetime.combine(date(next_year, next_number, 1), time.min, tzinfo=tz),
    )


def month_label(value: str, now: datetime, tz: tzinfo) -> str:
    """Display label such as "March (current)" or "all"."""
    window = month_window(value, now, tz)
    if window is None:
        return "all"
    name = window[0].strftime("%B %Y")
    keyword = value.strip().lower()
    if keyword in RELATIVE_MONTHS:
        return f"{name} ({keyword})"
    return name
