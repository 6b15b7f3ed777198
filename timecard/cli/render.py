# ==============================================================================
# Report Rendering
# ==============================================================================
"""
Turns a Report into table rows, a rich Table, CSV, or a JSON document.

Durations are rounded (or shown exactly) only here; the Report itself
always carries exact totals.
"""

import csv
from datetime import timedelta, tzinfo
from typing import Any, TextIO

from rich.table import Table

from timecard.cli.shared import PRETTY_TIME, REPORT_DATE, C, I
from timecard.core.models import Anomaly, PeriodKind, Report, Weekday
from timecard.utils.durations import format_duration

PROVISIONAL_MARK = "*"

DAILY_COLUMNS = ["Date", "Total Hours", "Number of Shifts", "Avg. Shift Duration"]
WEEKLY_COLUMNS = [
    "Week Of",
    "Total Hours",
    "Week End",
    "Number of Shifts",
    "Avg. Shift Duration",
]


# ==============================================================================
# Rows
# ==============================================================================


def day_columns(week_start: Weekday) -> list[str]:
    """Three-letter day names starting at ``week_start``."""
    return [Weekday((week_start + offset) % 7).name[:3].title() for offset in range(7)]


def report_columns(report: Report, week_start: Weekday = Weekday.MONDAY) -> list[str]:
    if report.period_kind == PeriodKind.DAILY:
        return list(DAILY_COLUMNS)
    return WEEKLY_COLUMNS + day_columns(week_start)


def report_rows(
    report: Report,
    week_start: Weekday = Weekday.MONDAY,
    exact: bool = False,
    mark_provisional: bool = False,
) -> list[dict[str, str]]:
    """
    One display row per bucket, keyed by column name.

    Args:
        report: Aggregated report
        week_start: First day of the week, for the per-day column names
        exact: Show exact durations instead of rounded
        mark_provisional: Append a marker to totals that include open-session time

    Returns:
        List of row dicts in bucket order
    """
    rows = []
    for summary in report.buckets:
        total = format_duration(summary.total, exact)
        if mark_provisional and summary.provisional:
            total += PROVISIONAL_MARK

        if report.period_kind == PeriodKind.DAILY:
            rows.append(
                {
                    "Date": summary.period_start.strftime(REPORT_DATE),
                    "Total Hours": total,
                    "Number of Shifts": str(summary.shift_count),
                    "Avg. Shift Duration": format_duration(summary.average_shift, exact),
                }
            )
            continue

        week_end = summary.period_end.date() - timedelta(days=1)
        row = {
            "Week Of": summary.period_start.strftime(REPORT_DATE),
            "Total Hours": total,
            "Week End": week_end.strftime(REPORT_DATE),
            "Number of Shifts": str(summary.shift_count),
            "Avg. Shift Duration": format_duration(summary.average_shift, exact),
        }
        daily_totals = summary.daily_totals or (timedelta(0),) * 7
        for name, value in zip(day_columns(week_start), daily_totals):
            row[name] = format_duration(value, exact)
        rows.append(row)
    return rows


def last_rows(rows: list[dict[str, str]], count: int | None) -> list[dict[str, str]]:
    """Trailing ``count`` rows, or every row when ``count`` is None."""
    if count is None:
        return rows
    return rows[-count:]


# ==============================================================================
# Output Formats
# ==============================================================================


def report_table(rows: list[dict[str, str]], columns: list[str], title: str) -> Table:
    """Build a rich Table from report rows."""
    table = Table(title=title, show_header=True, header_style="bold")
    for name in columns:
        justify = "left" if name in ("Date", "Week Of", "Week End") else "right"
        table.add_column(name, justify=justify)
    for row in rows:
        table.add_row(*(row.get(name, "") for name in columns))
    return table


def write_csv(rows: list[dict[str, str]], columns: list[str], stream: TextIO) -> None:
    """Write report rows as CSV with a header line."""
    writer = csv.DictWriter(stream, fieldnames=columns)
    writer.writeheader()
    writer.writerows(rows)


def _seconds(value: timedelta) -> float:
    return value.total_seconds()


def report_to_dict(report: Report) -> dict[str, Any]:
    """JSON-ready representation of a report; durations in seconds."""
    return {
        "period_kind": report.period_kind.value,
        "timezone": report.timezone,
        "total_seconds": _seconds(report.total),
        "shift_count": report.shift_count,
        "provisional": report.has_provisional_data,
        "buckets": [
            {
                "period_start": summary.period_start.isoformat(),
                "period_end": summary.period_end.isoformat(),
                "total_seconds": _seconds(summary.total),
                "fragment_count": summary.fragment_count,
                "shift_count": summary.shift_count,
                "average_shift_seconds": _seconds(summary.average_shift),
                "provisional": summary.provisional,
                "daily_totals_seconds": (
                    [_seconds(v) for v in summary.daily_totals]
                    if summary.daily_totals is not None
                    else None
                ),
            }
            for summary in report.buckets
        ],
        "anomalies": [
            {
                "kind": anomaly.kind.value,
                "index": anomaly.index,
                "timestamp": anomaly.timestamp.isoformat(),
                "message": anomaly.message,
            }
            for anomaly in report.anomalies
        ],
    }


# ==============================================================================
# Warnings
# ==============================================================================


def _anomaly_line(anomaly: Anomaly, tz: tzinfo) -> str:
    when = anomaly.timestamp.astimezone(tz)
    stamp = f"{when.strftime(PRETTY_TIME)} {when.strftime(REPORT_DATE)}"
    label = anomaly.kind.value.replace("_", " ")
    return f"  {C.BRIGHT_YELLOW}{I.WARN}{C.RESET} entry {anomaly.index + 1} ({stamp}): {label}"


def print_warnings(anomalies: tuple[Anomaly, ...], tz: tzinfo) -> None:
    """Print the anomaly warnings section, if any."""
    if not anomalies:
        return
    print()
    print(f"  {C.BOLD}{C.BRIGHT_YELLOW}Warnings ({len(anomalies)}){C.RESET}")
    for anomaly in anomalies:
        print(_anomaly_line(anomaly, tz))
        if anomaly.message:
            print(f"    {C.DIM}{anomaly.message}{C.RESET}")
