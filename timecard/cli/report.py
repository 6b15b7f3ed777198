# ==============================================================================
# Report Commands
# ==============================================================================
"""
Weekly and daily hour reports for the timecard CLI.

Both commands run the full pipeline over the stored event log and then
narrow the result to a window: a month for the weekly report, the
current week for the daily report.
"""

import json as _json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from timecard.cli.render import (
    PROVISIONAL_MARK,
    last_rows,
    print_warnings,
    report_columns,
    report_rows,
    report_table,
    report_to_dict,
    write_csv,
)
from timecard.cli.shared import (
    REPORT_DATE,
    C,
    I,
    fail,
    get_repository,
    get_timezone,
    parse_rows_option,
    warn,
)
from timecard.core.bucketer import bucket_bounds
from timecard.core.errors import TimecardError
from timecard.core.models import PeriodKind
from timecard.core.pipeline import build_report, filter_report
from timecard.utils.config import get_settings
from timecard.utils.durations import format_duration
from timecard.utils.months import month_label, month_window

logger = logging.getLogger(__name__)


# ==============================================================================
# Shared Options
# ==============================================================================

RowsOption = Annotated[
    Optional[str],
    typer.Option("--rows", "-n", help="Show the last N rows, or 'all' [default: from config]"),
]
ExactOption = Annotated[
    bool, typer.Option("--exact", help="Show exact durations instead of rounded")
]
OutputOption = Annotated[
    Optional[str],
    typer.Option("--output", "-o", help="Export every row as CSV to PATH ('-' for stdout)"),
]
JustTableOption = Annotated[
    bool, typer.Option("--just-table", "-j", help="Print only the table")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


# ==============================================================================
# Helper Functions
# ==============================================================================


def _run_report(
    period_kind: PeriodKind,
    window: tuple[datetime, datetime] | None,
    label: str,
    spill_over: bool,
    rows: Optional[str],
    exact: bool,
    output: Optional[str],
    just_table: bool,
    json_output: bool,
    now: datetime,
) -> None:
    settings = get_settings()
    tz = get_timezone()
    week_start = settings.report.week_start
    row_count = parse_rows_option(rows, settings.report.rows)
    exact = exact or settings.report.exact_durations

    repository = get_repository()
    try:
        events = repository.load()
    except TimecardError as e:
        fail(str(e))

    report, _ = build_report(events, period_kind, tz, week_start=week_start, now=now)
    if window is not None:
        report = filter_report(report, window[0], window[1], spill_over=spill_over)
    logger.debug("Report for %s has %d buckets", label, len(report.buckets))

    if json_output:
        print(_json.dumps(report_to_dict(report), indent=2))
        return

    columns = report_columns(report, week_start)

    if output == "-":
        write_csv(report_rows(report, week_start, exact), columns, sys.stdout)
        return

    if output is not None:
        path = Path(output)
        try:
            with path.open("w", newline="") as f:
                write_csv(report_rows(report, week_start, exact), columns, f)
        except OSError as e:
            fail(f"Could not write {path}: {e}")
        if not just_table:
            print(f"{C.BRIGHT_GREEN}{I.CHECK} Exported {len(report.buckets)} rows to {path}{C.RESET}")

    if not report.buckets:
        if not just_table:
            warn(f"No hours recorded for {label}")
        return

    table_rows = last_rows(report_rows(report, week_start, exact, mark_provisional=True), row_count)
    title = f"{period_kind.value.title()} Hours - {label}"
    console = Console()

    if just_table:
        console.print(report_table(table_rows, columns, title))
        return

    print()
    console.print(report_table(table_rows, columns, title))
    if len(table_rows) < len(report.buckets):
        print(f"  {C.DIM}Showing last {len(table_rows)} of {len(report.buckets)} rows{C.RESET}")
    print(f"  {C.BOLD}Total:{C.RESET}  {format_duration(report.total, exact)}")
    print(f"  {C.BOLD}Shifts:{C.RESET} {report.shift_count}")
    if report.has_provisional_data:
        print(f"  {C.DIM}{PROVISIONAL_MARK} includes time from the session still in progress{C.RESET}")
    print_warnings(report.anomalies, tz)
    print()


# ==============================================================================
# Commands
# ==============================================================================


def report_weekly(
    month: Annotated[
        str,
        typer.Option(
            "--month",
            "-m",
            help="Month to report: current, previous, next, all, a name or 1-12",
        ),
    ] = "current",
    spill_over: Annotated[
        bool,
        typer.Option("--spill-over", "-s", help="Include weeks crossing into or out of the month"),
    ] = False,
    rows: RowsOption = None,
    exact: ExactOption = False,
    output: OutputOption = None,
    just_table: JustTableOption = False,
    json_output: JsonOption = False,
) -> None:
    """Show hours worked per week.

    Examples:
        timecard report weekly
        timecard report weekly --month previous --spill-over
        timecard report weekly --month all --rows all --output hours.csv
    """
    now = datetime.now(timezone.utc)
    tz = get_timezone()
    try:
        window = month_window(month, now, tz)
        label = month_label(month, now, tz)
    except ValueError as e:
        fail(str(e))

    _run_report(
        PeriodKind.WEEKLY,
        window,
        label,
        spill_over,
        rows,
        exact,
        output,
        just_table,
        json_output,
        now,
    )


def report_daily(
    rows: RowsOption = None,
    exact: ExactOption = False,
    output: OutputOption = None,
    just_table: JustTableOption = False,
    json_output: JsonOption = False,
) -> None:
    """Show hours worked per day in the current week.

    Examples:
        timecard report daily
        timecard report daily --exact
    """
    now = datetime.now(timezone.utc)
    tz = get_timezone()
    window = bucket_bounds(now, PeriodKind.WEEKLY, tz, get_settings().report.week_start)
    label = f"week of {window[0].strftime(REPORT_DATE)}"

    _run_report(
        PeriodKind.DAILY,
        window,
        label,
        False,
        rows,
        exact,
        output,
        just_table,
        json_output,
        now,
    )
