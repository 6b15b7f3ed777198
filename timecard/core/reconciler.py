# ==============================================================================
# Reconciler - Pure Domain Logic
# ==============================================================================
"""
Pairs raw clock events into sessions and classifies irregularities.

The reconciler makes a single linear pass over the events in the order they
were received, tracking which direction it expects next:
- A matching clock in opens a pending session
- A matching clock out closes it
- Anything else is recorded as an anomaly and the state is reset so that
  processing can recover

Reconciliation never fails on messy input. Every event ends up either in a
session or in an unmatched-event anomaly, never both and never neither.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from timecard.core.models import (
    Anomaly,
    AnomalyKind,
    Direction,
    Event,
    ReconciliationResult,
    Session,
)

logger = logging.getLogger(__name__)


class Reconciler:
    """
    Stateful single-pass event pairing.

    A Reconciler instance holds the running state of one pass and is
    discarded afterwards; use :func:`reconcile` for the common case.
    """

    def __init__(self) -> None:
        self.expecting = Direction.CLOCK_IN
        self.sessions: list[Session] = []
        self.anomalies: list[Anomaly] = []
        self._pending: tuple[int, Event] | None = None
        self._previous: datetime | None = None
        self._latest_before_pending: datetime | None = None
        self._latest: datetime | None = None
        self._last_end: datetime | None = None
        self._count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def feed(self, index: int, event: Event) -> None:
        """Process one event at input position ``index``."""
        self._count += 1
        timestamp = event.timestamp

        if self._previous is not None and timestamp <= self._previous:
            self._flag(
                AnomalyKind.OUT_OF_ORDER,
                index,
                event,
                f"Clock {event.direction.value} at {timestamp.isoformat()} is not after "
                f"the previous entry at {self._previous.isoformat()}",
            )
        self._previous = timestamp

        if event.direction == self.expecting:
            if event.direction == Direction.CLOCK_IN:
                self._open(index, event)
            else:
                self._close(index, event)
        elif event.direction == Direction.CLOCK_IN:
            # Two clock ins in a row: drop the stale one, restart from this one
            pending_index, pending_event = self._pending
            self._flag(
                AnomalyKind.UNMATCHED_CLOCK_IN,
                pending_index,
                pending_event,
                f"Clock in at {pending_event.timestamp.isoformat()} has no clock out "
                "before the next clock in",
            )
            self._open(index, event)
        else:
            self._flag(
                AnomalyKind.UNMATCHED_CLOCK_OUT,
                index,
                event,
                f"Clock out at {timestamp.isoformat()} has no preceding clock in",
            )

        if self._latest is None or timestamp > self._latest:
            self._latest = timestamp

    def finish(self) -> ReconciliationResult:
        """Seal any pending clock in and return the result."""
        if self._pending is not None:
            index, event = self._pending
            is_last = index == self._count - 1
            is_most_recent = (
                self._latest_before_pending is None
                or event.timestamp > self._latest_before_pending
            )
            if is_last and is_most_recent:
                self.sessions.append(
                    Session(
                        start_index=index,
                        start_event=event,
                        start=self._effective_start(event.timestamp),
                    )
                )
                logger.debug("Open session since %s", event.timestamp.isoformat())
            else:
                self._flag(
                    AnomalyKind.UNMATCHED_CLOCK_IN,
                    index,
                    event,
                    f"Clock in at {event.timestamp.isoformat()} is never clocked out",
                )
            self._pending = None

        anomalies = sorted(self.anomalies, key=lambda a: a.index)
        logger.info(
            "Reconciled %d events into %d sessions with %d anomalies",
            self._count,
            len(self.sessions),
            len(anomalies),
        )
        return ReconciliationResult(
            sessions=tuple(self.sessions),
            anomalies=tuple(anomalies),
            event_count=self._count,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open(self, index: int, event: Event) -> None:
        self._pending = (index, event)
        self._latest_before_pending = self._latest
        self.expecting = Direction.CLOCK_OUT

    def _close(self, index: int, event: Event) -> None:
        start_index, start_event = self._pending
        if event.timestamp <= start_event.timestamp:
            self._flag(
                AnomalyKind.ZERO_OR_NEGATIVE_DURATION,
                index,
                event,
                f"Clock out at {event.timestamp.isoformat()} does not follow its clock in "
                f"at {start_event.timestamp.isoformat()}; duration clamped to zero",
            )

        start = self._effective_start(start_event.timestamp)
        end = max(event.timestamp, start)
        self.sessions.append(
            Session(
                start_index=start_index,
                end_index=index,
                start_event=start_event,
                end_event=event,
                start=start,
                end=end,
            )
        )
        self._last_end = end
        self._pending = None
        self.expecting = Direction.CLOCK_IN

    def _effective_start(self, timestamp: datetime) -> datetime:
        # Sessions never overlap, even when the input is out of order
        if self._last_end is not None and timestamp < self._last_end:
            return self._last_end
        return timestamp

    def _flag(self, kind: AnomalyKind, index: int, event: Event, message: str) -> None:
        logger.debug("Anomaly %s at input position %d: %s", kind.value, index, message)
        self.anomalies.append(Anomaly(kind=kind, index=index, event=event, message=message))


def reconcile(events: Iterable[Event]) -> ReconciliationResult:
    """
    Pair events into sessions and collect anomalies.

    Args:
        events: Clock events in the order they were received

    Returns:
        ReconciliationResult with ordered sessions and anomalies
    """
    reconciler = Reconciler()
    for index, event in enumerate(events):
        reconciler.feed(index, event)
    return reconciler.finish()
