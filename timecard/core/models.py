# ==============================================================================
# Timecard Domain Models
# ==============================================================================
"""
Pydantic models for clock events, sessions, buckets and reports.

These models are used for:
- Validating events read from the event store
- Carrying reconciliation and bucketing results between core stages
- Type safety throughout the application

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

ZERO = timedelta(0)


class Direction(str, Enum):
    """Clock transition direction, spelled as stored on disk."""

    CLOCK_IN = "in"
    CLOCK_OUT = "out"


class AnomalyKind(str, Enum):
    """Irregularities detected while reconciling the event log."""

    UNMATCHED_CLOCK_IN = "unmatched_clock_in"
    UNMATCHED_CLOCK_OUT = "unmatched_clock_out"
    OUT_OF_ORDER = "out_of_order"
    ZERO_OR_NEGATIVE_DURATION = "zero_or_negative_duration"

    @property
    def consumes_event(self) -> bool:
        """
        True when the anomaly is the final resting place of its event.

        Unmatched events belong to no session, so the anomaly accounts for
        them. Out-of-order and zero-duration anomalies only flag an event
        that still lives in a session (or in an unmatched anomaly).
        """
        return self in (AnomalyKind.UNMATCHED_CLOCK_IN, AnomalyKind.UNMATCHED_CLOCK_OUT)


class PeriodKind(str, Enum):
    """Reporting period granularity."""

    DAILY = "daily"
    WEEKLY = "weekly"


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class Event(BaseModel):
    """
    A single clock transition.

    Attributes:
        direction: Whether this is a clock in or a clock out
        timestamp: Timezone-aware instant of the transition
    """

    model_config = ConfigDict(frozen=True)

    direction: Direction = Field(..., description="Clock direction (in/out)")
    timestamp: datetime = Field(..., description="Timezone-aware instant")

    @field_validator("timestamp")
    @classmethod
    def _require_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("event timestamp must be timezone-aware")
        return value


class Session(BaseModel):
    """
    A work interval built from a matched clock in / clock out pair.

    ``start`` and ``end`` are the effective bounds used for all duration
    math. They equal the raw event timestamps unless the input was out of
    order, in which case they are pushed forward so that sessions never
    overlap and ``end`` never precedes ``start``.

    Attributes:
        start_index: Position of the clock-in event in the input sequence
        end_index: Position of the clock-out event, or None while open
        start_event: The clock-in event
        end_event: The clock-out event, or None while open
        start: Effective start instant
        end: Effective end instant, or None while open
    """

    model_config = ConfigDict(frozen=True)

    start_index: int = Field(..., ge=0)
    end_index: int | None = Field(None, ge=0)
    start_event: Event
    end_event: Event | None = None
    start: datetime
    end: datetime | None = None

    @property
    def is_open(self) -> bool:
        """Session has no recorded end yet."""
        return self.end is None

    @property
    def duration(self) -> timedelta | None:
        """Closed session duration; None while the session is open."""
        if self.end is None:
            return None
        return self.end - self.start

    def provisional_end(self, now: datetime) -> datetime:
        """End instant to use for reporting, substituting ``now`` when open."""
        if self.end is not None:
            return self.end
        return max(now, self.start)

    def duration_until(self, now: datetime) -> timedelta:
        """Duration using ``now`` as the provisional end of an open session."""
        return self.provisional_end(now) - self.start


class Anomaly(BaseModel):
    """
    A detected irregularity in the raw event log.

    Attributes:
        kind: Classification of the irregularity
        index: Position of the offending event in the input sequence
        event: The offending event
        message: Human-readable explanation
    """

    model_config = ConfigDict(frozen=True)

    kind: AnomalyKind
    index: int = Field(..., ge=0)
    event: Event
    message: str = ""

    @property
    def timestamp(self) -> datetime:
        return self.event.timestamp


class ReconciliationResult(BaseModel):
    """Sessions and anomalies produced from one pass over the event log."""

    model_config = ConfigDict(frozen=True)

    sessions: tuple[Session, ...] = ()
    anomalies: tuple[Anomaly, ...] = ()
    event_count: int = 0

    @property
    def open_session(self) -> Session | None:
        if self.sessions and self.sessions[-1].is_open:
            return self.sessions[-1]
        return None

    def accounted_indices(self) -> list[int]:
        """
        Input positions referenced by sessions and event-consuming anomalies.

        For a well-formed result this is a permutation of
        ``range(event_count)``.
        """
        indices: list[int] = []
        for session in self.sessions:
            indices.append(session.start_index)
            if session.end_index is not None:
                indices.append(session.end_index)
        indices.extend(a.index for a in self.anomalies if a.kind.consumes_event)
        return indices

    def anomalies_of(self, kind: AnomalyKind) -> list[Anomaly]:
        return [a for a in self.anomalies if a.kind == kind]


class SessionFragment(BaseModel):
    """
    The part of a session that falls inside one bucket.

    Instants are stored in UTC so that subtraction is always exact elapsed
    time, independent of DST transitions in the target timezone.
    """

    model_config = ConfigDict(frozen=True)

    session_id: int = Field(..., ge=0, description="Index of the session in the reconciled sequence")
    start: datetime
    end: datetime
    provisional: bool = Field(False, description="Clipped from an open session using 'now'")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class Bucket(BaseModel):
    """
    One reporting period ``[period_start, period_end)`` in the target timezone.

    Attributes:
        period_kind: Daily or weekly
        period_start: Local midnight opening the period (aware)
        period_end: Local midnight closing the period (aware, exclusive)
        fragments: Session fragments clipped to this period
        session_ids: Every session present in the period, including
            zero-length sessions that produce no fragment
        empty_fragments: Zero-length sessions starting in this period, kept
            as start == end markers so that windowing can place them
    """

    model_config = ConfigDict(frozen=True)

    period_kind: PeriodKind
    period_start: datetime
    period_end: datetime
    fragments: tuple[SessionFragment, ...] = ()
    session_ids: tuple[int, ...] = ()
    empty_fragments: tuple[SessionFragment, ...] = ()

    @property
    def provisional(self) -> bool:
        """Bucket contains time from a still-open session."""
        return any(f.provisional for f in self.fragments)

    def contains(self, instant: datetime) -> bool:
        instant = instant.astimezone(timezone.utc)
        return (
            self.period_start.astimezone(timezone.utc)
            <= instant
            < self.period_end.astimezone(timezone.utc)
        )


class BucketSummary(BaseModel):
    """Aggregated totals for one bucket."""

    model_config = ConfigDict(frozen=True)

    bucket: Bucket
    total: timedelta = ZERO
    fragment_count: int = 0
    shift_count: int = 0
    average_shift: timedelta = ZERO
    provisional: bool = False
    anomalies: tuple[Anomaly, ...] = ()
    daily_totals: tuple[timedelta, ...] | None = Field(
        None, description="Seven per-day totals starting at the week-start day (weekly only)"
    )

    @property
    def period_start(self) -> datetime:
        return self.bucket.period_start

    @property
    def period_end(self) -> datetime:
        return self.bucket.period_end


class Report(BaseModel):
    """
    Final aggregate handed to renderers.

    Attributes:
        period_kind: Granularity of the buckets
        timezone: IANA key (or tzinfo name) of the target timezone
        buckets: Per-bucket summaries, ascending by period start
        total: Grand total across all buckets
        anomalies: Every anomaly from reconciliation, for a warnings section
    """

    model_config = ConfigDict(frozen=True)

    period_kind: PeriodKind
    timezone: str
    buckets: tuple[BucketSummary, ...] = ()
    total: timedelta = ZERO
    anomalies: tuple[Anomaly, ...] = ()

    @property
    def anomaly_count(self) -> int:
        return len(self.anomalies)

    @property
    def has_provisional_data(self) -> bool:
        return any(b.provisional for b in self.buckets)

    @property
    def shift_count(self) -> int:
        return sum(b.shift_count for b in self.buckets)
