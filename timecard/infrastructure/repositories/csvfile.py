# ==============================================================================
# CSV Event Repository
# ==============================================================================
"""
Append-only CSV implementation of the EventRepository interface.

File layout (header written once, when the file is created):

    entry_type,timestamp
    in,2024-03-04T08:00:00.000000-08:00
    out,2024-03-04T12:00:00.000000-08:00

Rows are validated with the Event model on load. Any malformed row aborts
the load with a MalformedEventFileError listing every bad line, so a
corrupt file is never silently half-read.
"""

import csv
import logging
from pathlib import Path

from pydantic import ValidationError

from timecard.base.repositories import EventRepository
from timecard.core.errors import EventStoreError, MalformedEventFileError
from timecard.core.models import Event

logger = logging.getLogger(__name__)

FIELDNAMES = ["entry_type", "timestamp"]


def _format_timestamp(event: Event) -> str:
    return event.timestamp.isoformat(timespec="microseconds")


class CsvEventRepository(EventRepository):
    """
    CSV file implementation of EventRepository.

    Events are appended in the order they are recorded; the file is never
    rewritten.
    """

    def __init__(self, path: Path):
        """
        Initialize the repository.

        Args:
            path: Location of the CSV file (created on first append)
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> list[Event]:
        """
        Read every event in file order.

        Returns:
            List of events (empty when the file does not exist)

        Raises:
            MalformedEventFileError: If any row fails validation
            EventStoreError: If the file cannot be read
        """
        if not self._path.exists():
            return []

        events: list[Event] = []
        errors: list[str] = []
        try:
            with open(self._path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f)
                if reader.fieldnames is None:
                    return []
                missing = [name for name in FIELDNAMES if name not in reader.fieldnames]
                if missing:
                    raise MalformedEventFileError(
                        self._path, [f"missing column(s): {', '.join(missing)}"]
                    )
                for row in reader:
                    try:
                        events.append(
                            Event.model_validate(
                                {
                                    "direction": (row["entry_type"] or "").strip(),
                                    "timestamp": (row["timestamp"] or "").strip(),
                                }
                            )
                        )
                    except ValidationError as e:
                        detail = "; ".join(err["msg"] for err in e.errors())
                        errors.append(f"line {reader.line_num}: {detail}")
        except OSError as e:
            raise EventStoreError(f"Failed to read CSV file {self._path}: {e}") from e

        if errors:
            for error in errors:
                logger.error("Malformed CSV entry: %s", error)
            raise MalformedEventFileError(self._path, errors)

        logger.debug("Loaded %d events from %s", len(events), self._path)
        return events

    def append(self, event: Event) -> None:
        """
        Append one event, creating the file (with header) if needed.

        Raises:
            EventStoreError: If the file cannot be written
        """
        is_new = not self._path.exists()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
                if is_new:
                    writer.writeheader()
                writer.writerow(
                    {
                        "entry_type": event.direction.value,
                        "timestamp": _format_timestamp(event),
                    }
                )
        except OSError as e:
            raise EventStoreError(
                f"Failed to write to CSV file {self._path}: {e}. "
                f"Ensure you have proper permissions for {self._path}"
            ) from e

        logger.info(
            "Appended clock %s at %s to %s", event.direction.value, event.timestamp, self._path
        )
