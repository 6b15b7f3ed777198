# ==============================================================================
# Bucketer - Pure Domain Logic
# ==============================================================================
"""
Splits sessions into daily or weekly reporting periods.

Periods are half-open intervals ``[start, end)`` aligned to local midnight in
the target timezone (daily) or to local midnight of the configured week-start
day (weekly). Sessions crossing a boundary are clipped into one fragment per
period they touch.

All clipping is done on UTC instants, so a fragment's duration is the real
elapsed time even across DST transitions, and the fragments of a session
always add up to exactly the session's duration.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import NamedTuple

from timecard.core.errors import FragmentOutOfBucketError, UnknownPeriodKindError
from timecard.core.models import Bucket, PeriodKind, Session, SessionFragment, Weekday

logger = logging.getLogger(__name__)

_PERIOD_DAYS = {
    PeriodKind.DAILY: 1,
    PeriodKind.WEEKLY: 7,
}


class _Interval(NamedTuple):
    session_id: int
    start: datetime
    end: datetime
    provisional: bool


# ==============================================================================
# Alignment
# ==============================================================================


def _coerce_kind(period_kind: PeriodKind | str) -> PeriodKind:
    try:
        kind = PeriodKind(period_kind)
    except ValueError as e:
        raise UnknownPeriodKindError(period_kind) from e
    if kind not in _PERIOD_DAYS:
        raise UnknownPeriodKindError(kind)
    return kind


def _period_key(
    instant: datetime, kind: PeriodKind, tz: tzinfo, week_start: Weekday
) -> date:
    """Local date on which the period containing ``instant`` begins."""
    local_date = instant.astimezone(tz).date()
    if kind == PeriodKind.DAILY:
        return local_date
    if kind == PeriodKind.WEEKLY:
        return local_date - timedelta(days=(local_date.weekday() - int(week_start)) % 7)
    raise UnknownPeriodKindError(kind)


def _local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)


def bucket_bounds(
    instant: datetime,
    period_kind: PeriodKind | str,
    tz: tzinfo,
    week_start: Weekday = Weekday.MONDAY,
) -> tuple[datetime, datetime]:
    """
    Get the aligned period containing an instant.

    Args:
        instant: Timezone-aware instant
        period_kind: Daily or weekly
        tz: Target timezone
        week_start: First day of the week for weekly periods

    Returns:
        Tuple of (period_start, period_end) as aware local datetimes
    """
    kind = _coerce_kind(period_kind)
    key = _period_key(instant, kind, tz, week_start)
    return (
        _local_midnight(key, tz),
        _local_midnight(key + timedelta(days=_PERIOD_DAYS[kind]), tz),
    )


# ==============================================================================
# Splitting
# ==============================================================================


def _split(
    intervals: Iterable[_Interval],
    kind: PeriodKind,
    tz: tzinfo,
    week_start: Weekday,
) -> list[Bucket]:
    step = timedelta(days=_PERIOD_DAYS[kind])
    fragments: dict[date, list[SessionFragment]] = {}
    present: dict[date, list[int]] = {}
    empties: dict[date, list[SessionFragment]] = {}

    def mark(key: date, session_id: int) -> None:
        ids = present.setdefault(key, [])
        if session_id not in ids:
            ids.append(session_id)
        fragments.setdefault(key, [])

    for interval in intervals:
        key = _period_key(interval.start, kind, tz, week_start)

        if interval.end <= interval.start:
            # Zero length: shown in its starting period, contributes no time
            mark(key, interval.session_id)
            empties.setdefault(key, []).append(
                SessionFragment(
                    session_id=interval.session_id,
                    start=interval.start,
                    end=interval.start,
                    provisional=interval.provisional,
                )
            )
            continue

        while True:
            period_start = _utc(_local_midnight(key, tz))
            period_end = _utc(_local_midnight(key + step, tz))
            start = max(interval.start, period_start)
            end = min(interval.end, period_end)
            if end > start:
                mark(key, interval.session_id)
                fragments[key].append(
                    SessionFragment(
                        session_id=interval.session_id,
                        start=start,
                        end=end,
                        provisional=interval.provisional,
                    )
                )
            if interval.end <= period_end:
                break
            key += step

    if not present:
        return []

    buckets = []
    key, last = min(present), max(present)
    while key <= last:
        bucket = Bucket(
            period_kind=kind,
            period_start=_local_midnight(key, tz),
            period_end=_local_midnight(key + step, tz),
            fragments=tuple(fragments.get(key, ())),
            session_ids=tuple(present.get(key, ())),
            empty_fragments=tuple(empties.get(key, ())),
        )
        for fragment in bucket.fragments:
            check_fragment(fragment, bucket)
        buckets.append(bucket)
        key += step

    logger.debug(
        "Split %d sessions into %d %s buckets",
        len({sid for ids in present.values() for sid in ids}),
        len(buckets),
        kind.value,
    )
    return buckets


def check_fragment(fragment: SessionFragment, bucket: Bucket) -> None:
    """Raise FragmentOutOfBucketError unless the fragment lies inside the bucket."""
    if not (
        bucket.contains(fragment.start)
        and fragment.start <= fragment.end
        and fragment.end <= _utc(bucket.period_end)
    ):
        raise FragmentOutOfBucketError(fragment, bucket.period_start, bucket.period_end)


def bucketize(
    sessions: Iterable[Session],
    period_kind: PeriodKind | str,
    tz: tzinfo,
    week_start: Weekday = Weekday.MONDAY,
    now: datetime | None = None,
) -> list[Bucket]:
    """
    Assign sessions to aligned reporting periods.

    Open sessions are bucketed up to ``now`` and their fragments are marked
    provisional. Empty periods between the first and last period with data
    are emitted so gaps show up as zero rows; no periods are synthesized
    outside that span.

    Args:
        sessions: Reconciled sessions, in order
        period_kind: Daily or weekly
        tz: Target timezone used for alignment
        week_start: First day of the week for weekly periods
        now: Evaluation instant for open sessions (defaults to the current time)

    Returns:
        Buckets in ascending order of period start

    Raises:
        UnknownPeriodKindError: If the period kind has no alignment rule
    """
    kind = _coerce_kind(period_kind)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        raise ValueError("now must be timezone-aware")

    intervals = [
        _Interval(
            session_id=i,
            start=_utc(session.start),
            end=_utc(session.provisional_end(now)),
            provisional=session.is_open,
        )
        for i, session in enumerate(sessions)
    ]
    return _split(intervals, kind, tz, week_start)


def bucketize_fragments(
    fragments: Iterable[SessionFragment],
    period_kind: PeriodKind | str,
    tz: tzinfo,
    week_start: Weekday = Weekday.MONDAY,
) -> list[Bucket]:
    """Re-split existing fragments with the same rules as :func:`bucketize`."""
    kind = _coerce_kind(period_kind)
    intervals = [
        _Interval(f.session_id, f.start, f.end, f.provisional) for f in fragments
    ]
    return _split(intervals, kind, tz, week_start)
