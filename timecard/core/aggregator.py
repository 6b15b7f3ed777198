# ==============================================================================
# Aggregator - Pure Domain Logic
# ==============================================================================
"""
Turns buckets of session fragments into a Report.

Durations are summed as ``timedelta`` values, which are exact integer counts
of microseconds; nothing is rounded here. Rounding is a display concern.

Anomalies are attributed to the bucket containing their raw timestamp. An
anomaly before the first bucket goes to the first bucket and one after the
last bucket goes to the last bucket, so every anomaly is shown somewhere
when there is at least one bucket.
"""

import logging
from bisect import bisect_right
from collections.abc import Iterable, Sequence
from datetime import timedelta, timezone, tzinfo

from timecard.core.bucketer import bucketize_fragments, check_fragment
from timecard.core.errors import ContractViolation
from timecard.core.models import (
    ZERO,
    Anomaly,
    Bucket,
    BucketSummary,
    PeriodKind,
    Report,
)

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


def timezone_name(tz: tzinfo) -> str:
    """IANA key for zoneinfo timezones, tzname otherwise."""
    key = getattr(tz, "key", None)
    if key:
        return key
    return str(tz)


def _attribute(
    anomalies: Iterable[Anomaly], buckets: Sequence[Bucket]
) -> list[list[Anomaly]]:
    attributed: list[list[Anomaly]] = [[] for _ in buckets]
    if not buckets:
        return attributed

    starts = [b.period_start.astimezone(timezone.utc) for b in buckets]
    for anomaly in anomalies:
        position = bisect_right(starts, anomaly.timestamp.astimezone(timezone.utc)) - 1
        # Clamp to the nearest boundary bucket
        position = min(max(position, 0), len(buckets) - 1)
        attributed[position].append(anomaly)
    return attributed


def daily_breakdown(bucket: Bucket, tz: tzinfo) -> tuple[timedelta, ...]:
    """
    Seven per-day totals for a weekly bucket, starting at its first day.

    Reuses the bucketer's daily rules on the week's fragments.
    """
    totals = [ZERO] * DAYS_PER_WEEK
    week_first_day = bucket.period_start.date()
    for day in bucketize_fragments(bucket.fragments, PeriodKind.DAILY, tz):
        offset = (day.period_start.date() - week_first_day).days
        if not 0 <= offset < DAYS_PER_WEEK:
            raise ContractViolation(
                f"Day {day.period_start.date()} falls outside week of {week_first_day}"
            )
        totals[offset] += sum((f.duration for f in day.fragments), ZERO)
    return tuple(totals)


def summarize(bucket: Bucket, tz: tzinfo, anomalies: Iterable[Anomaly] = ()) -> BucketSummary:
    """Compute totals for a single bucket."""
    for fragment in bucket.fragments:
        check_fragment(fragment, bucket)

    total = sum((f.duration for f in bucket.fragments), ZERO)
    shift_count = len(bucket.session_ids)
    return BucketSummary(
        bucket=bucket,
        total=total,
        fragment_count=len(bucket.fragments),
        shift_count=shift_count,
        average_shift=total // shift_count if shift_count else ZERO,
        provisional=bucket.provisional,
        anomalies=tuple(anomalies),
        daily_totals=(
            daily_breakdown(bucket, tz) if bucket.period_kind == PeriodKind.WEEKLY else None
        ),
    )


def aggregate(
    buckets: Sequence[Bucket],
    tz: tzinfo,
    anomalies: Iterable[Anomaly] = (),
    period_kind: PeriodKind | None = None,
) -> Report:
    """
    Aggregate bucketed fragments into a Report.

    Args:
        buckets: Output of ``bucketize``, ascending by period start
        tz: Target timezone the buckets were aligned in
        anomalies: Reconciliation anomalies to attribute and carry along
        period_kind: Kind to report when ``buckets`` is empty

    Returns:
        Report with per-bucket summaries and a grand total

    Raises:
        ContractViolation: If buckets mix period kinds or a fragment
            escapes its bucket
    """
    kinds = {b.period_kind for b in buckets}
    if len(kinds) > 1:
        raise ContractViolation(
            f"Cannot aggregate mixed period kinds: {sorted(k.value for k in kinds)}"
        )
    kind = kinds.pop() if kinds else (period_kind or PeriodKind.DAILY)

    anomalies = tuple(anomalies)
    attributed = _attribute(anomalies, buckets)
    summaries = tuple(
        summarize(bucket, tz, bucket_anomalies)
        for bucket, bucket_anomalies in zip(buckets, attributed)
    )
    total = sum((s.total for s in summaries), ZERO)

    logger.debug(
        "Aggregated %d %s buckets, total %s, %d anomalies",
        len(summaries),
        kind.value,
        total,
        len(anomalies),
    )
    return Report(
        period_kind=kind,
        timezone=timezone_name(tz),
        buckets=summaries,
        total=total,
        anomalies=anomalies,
    )
