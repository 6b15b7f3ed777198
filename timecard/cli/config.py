# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the timecard CLI.
"""

import json
from typing import Annotated

import typer

from timecard.cli.shared import C, I, fail
from timecard.utils.config import get_settings


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display the effective configuration."""
    settings = get_settings()
    try:
        timezone_key = settings.get_timezone().key
    except ValueError as e:
        fail(str(e))

    config = {
        "data_folder": str(settings.data_folder_path),
        "data_file": str(settings.data_file),
        "timezone": timezone_key,
        "log_level": settings.log_level,
        "report": {
            "week_start": settings.report.week_start.name.title(),
            "rows": settings.report.rows,
            "exact_durations": settings.report.exact_durations,
        },
    }

    if json_output:
        print(json.dumps(config, indent=2))
        return

    print()
    print(f"  {C.BOLD}Timecard configuration{C.RESET}")
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Data file:    {config['data_file']}")
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Timezone:     {timezone_key}")
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Log level:    {settings.log_level}")
    print()
    print(f"  {C.BOLD}Reports{C.RESET}")
    report = config["report"]
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Week start:   {report['week_start']}")
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Rows:         {report['rows']}")
    print(f"  {C.BRIGHT_CYAN}{I.ARROW}{C.RESET} Exact:        {report['exact_durations']}")
    print()
