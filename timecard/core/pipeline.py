# ==============================================================================
# Report Pipeline
# ==============================================================================
"""
Composes the core stages: reconcile -> bucketize -> aggregate.

Also provides month windowing of a finished report, used by the weekly
report command.
"""

from collections.abc import Iterable
from datetime import datetime, timezone, tzinfo

from timecard.core.aggregator import aggregate
from timecard.core.bucketer import bucketize
from timecard.core.models import (
    ZERO,
    Bucket,
    Event,
    PeriodKind,
    ReconciliationResult,
    Report,
    SessionFragment,
    Weekday,
)
from timecard.core.reconciler import reconcile


def build_report(
    events: Iterable[Event],
    period_kind: PeriodKind | str,
    tz: tzinfo,
    week_start: Weekday = Weekday.MONDAY,
    now: datetime | None = None,
) -> tuple[Report, ReconciliationResult]:
    """
    Run the full pipeline over an event log.

    Args:
        events: Clock events in the order they were received
        period_kind: Daily or weekly
        tz: Target timezone
        week_start: First day of the week for weekly periods
        now: Evaluation instant for an open session

    Returns:
        Tuple of (report, reconciliation result)
    """
    result = reconcile(events)
    buckets = bucketize(result.sessions, period_kind, tz, week_start=week_start, now=now)
    report = aggregate(buckets, tz, result.anomalies, period_kind=PeriodKind(period_kind))
    return report, result


def _clip(
    fragments: Iterable[SessionFragment], start: datetime, end: datetime
) -> list[SessionFragment]:
    clipped = []
    for fragment in fragments:
        clipped_start = max(fragment.start, start)
        clipped_end = min(fragment.end, end)
        if clipped_end > clipped_start:
            clipped.append(
                fragment.model_copy(update={"start": clipped_start, "end": clipped_end})
            )
    return clipped


def _clip_bucket(bucket: Bucket, start: datetime, end: datetime) -> Bucket:
    """Restrict a bucket to the time it shares with ``[start, end)``."""
    fragments = _clip(bucket.fragments, start, end)
    empty_fragments = [f for f in bucket.empty_fragments if start <= f.start < end]
    kept_ids = {f.session_id for f in fragments} | {f.session_id for f in empty_fragments}
    return bucket.model_copy(
        update={
            "fragments": tuple(fragments),
            "session_ids": tuple(sid for sid in bucket.session_ids if sid in kept_ids),
            "empty_fragments": tuple(empty_fragments),
        }
    )


def filter_report(
    report: Report,
    start: datetime,
    end: datetime,
    spill_over: bool = False,
) -> Report:
    """
    Narrow a report to the window ``[start, end)``.

    Without spill-over only the time inside the window is counted: a bucket
    straddling a window edge keeps its period bounds but loses the fragments
    outside the window, and only anomalies timestamped inside the window are
    kept. With spill-over any bucket overlapping the window is kept whole,
    which includes weeks crossing into or out of it.

    The grand total and anomaly list are recomputed over the kept buckets.
    """
    start = start.astimezone(timezone.utc)
    end = end.astimezone(timezone.utc)

    def overlaps(bucket: Bucket) -> bool:
        return (
            bucket.period_start.astimezone(timezone.utc) < end
            and bucket.period_end.astimezone(timezone.utc) > start
        )

    if spill_over:
        summaries = tuple(b for b in report.buckets if overlaps(b.bucket))
        anomalies = tuple(
            sorted((a for b in summaries for a in b.anomalies), key=lambda a: a.index)
        )
        return report.model_copy(
            update={
                "buckets": summaries,
                "total": sum((b.total for b in summaries), ZERO),
                "anomalies": anomalies,
            }
        )

    buckets = [_clip_bucket(b.bucket, start, end) for b in report.buckets if overlaps(b.bucket)]
    # Periods left empty at the edges are not reported, as in bucketize
    while buckets and not buckets[0].session_ids:
        buckets.pop(0)
    while buckets and not buckets[-1].session_ids:
        buckets.pop()
    anomalies = tuple(a for a in report.anomalies if start <= a.timestamp < end)

    if not buckets:
        return report.model_copy(update={"buckets": (), "total": ZERO, "anomalies": anomalies})

    tz = buckets[0].period_start.tzinfo
    windowed = aggregate(buckets, tz, anomalies, period_kind=report.period_kind)
    return windowed.model_copy(update={"timezone": report.timezone})
