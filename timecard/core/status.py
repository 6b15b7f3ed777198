# ==============================================================================
# Clock Status - Pure Domain Logic
# ==============================================================================
"""
Determines whether the user is clocked in or out at a given instant.

The status at an instant is the direction of the last event at or before
that instant; ``until`` is the first event after it, if any.
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from timecard.core.models import Direction, Event


class ClockStatus(BaseModel):
    """
    Clock status at an instant.

    Attributes:
        at: Instant the status was evaluated for
        direction: Direction of the last event at or before ``at``,
            or None when there is no such event
        since: Timestamp of that event
        until: Timestamp of the next event after ``at``, if any
    """

    model_config = ConfigDict(frozen=True)

    at: datetime
    direction: Direction | None = None
    since: datetime | None = None
    until: datetime | None = None

    @property
    def is_clocked_in(self) -> bool:
        return self.direction == Direction.CLOCK_IN

    @property
    def next_direction(self) -> Direction:
        """Direction a toggle would record."""
        return Direction.CLOCK_OUT if self.is_clocked_in else Direction.CLOCK_IN


def clock_status(events: Iterable[Event], at: datetime) -> ClockStatus:
    """
    Evaluate the clock status at ``at``.

    Args:
        events: Events in stored order
        at: Timezone-aware instant

    Returns:
        ClockStatus for the instant
    """
    current: Event | None = None
    following: Event | None = None
    for event in events:
        if event.timestamp > at:
            following = event
            break
        current = event

    return ClockStatus(
        at=at,
        direction=current.direction if current else None,
        since=current.timestamp if current else None,
        until=following.timestamp if following else None,
    )
