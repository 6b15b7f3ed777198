# ==============================================================================
# Clock Entry Recording
# ==============================================================================
"""
Records clock in / clock out entries in the event store.

An entry is refused when it would break the log's continuity:
- It would be placed before an existing entry
- It repeats the current direction ("Already clocked in")

These checks keep newly recorded logs well-formed; the reconciler still
handles anything that was written by other means.
"""

import logging
from datetime import datetime, timedelta, timezone

from timecard.base.repositories import EventRepository
from timecard.core.errors import AlreadyClockedError, ContinuityError
from timecard.core.models import Direction, Event
from timecard.core.status import ClockStatus, clock_status

logger = logging.getLogger(__name__)


def resolve_instant(offset: timedelta | None = None, now: datetime | None = None) -> datetime:
    """Current instant shifted by an optional offset."""
    now = now or datetime.now(timezone.utc)
    return now + offset if offset else now


def current_status(repository: EventRepository, at: datetime) -> ClockStatus:
    """Clock status at ``at`` according to the stored events."""
    events = repository.load() if repository.exists() else []
    return clock_status(events, at)


def record_entry(
    repository: EventRepository,
    direction: Direction,
    at: datetime,
) -> Event:
    """
    Append a clock entry after validating continuity.

    Args:
        repository: Event store
        direction: Clock in or clock out
        at: Timezone-aware instant of the entry

    Returns:
        The recorded event

    Raises:
        ContinuityError: If an entry already exists after ``at``
        AlreadyClockedError: If the status at ``at`` already matches ``direction``
    """
    status = current_status(repository, at)
    if status.until is not None:
        raise ContinuityError(at, status.until)
    if status.direction == direction:
        raise AlreadyClockedError(direction.value)

    event = Event(direction=direction, timestamp=at)
    repository.append(event)
    return event


def toggle_entry(repository: EventRepository, at: datetime) -> Event:
    """Clock out when clocked in at ``at``, otherwise clock in."""
    status = current_status(repository, at)
    logger.debug("Toggling from %s", status.direction)
    return record_entry(repository, status.next_direction, at)
