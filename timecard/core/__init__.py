# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (Event, Session, Anomaly, Bucket, Report, ...)
- Reconciliation of clock events into sessions and anomalies
- Bucketing of sessions into daily/weekly periods
- Aggregation of buckets into reports
- Clock status at an instant

All code here is free of I/O and global state and easily unit-testable.
"""

from timecard.core.aggregator import aggregate
from timecard.core.bucketer import bucket_bounds, bucketize, bucketize_fragments
from timecard.core.models import (
    Anomaly,
    AnomalyKind,
    Bucket,
    BucketSummary,
    Direction,
    Event,
    PeriodKind,
    ReconciliationResult,
    Report,
    Session,
    SessionFragment,
    Weekday,
)
from timecard.core.pipeline import build_report, filter_report
from timecard.core.reconciler import Reconciler, reconcile
from timecard.core.status import ClockStatus, clock_status

__all__ = [
    "Anomaly",
    "AnomalyKind",
    "Bucket",
    "BucketSummary",
    "ClockStatus",
    "Direction",
    "Event",
    "PeriodKind",
    "ReconciliationResult",
    "Reconciler",
    "Report",
    "Session",
    "SessionFragment",
    "Weekday",
    "aggregate",
    "bucket_bounds",
    "bucketize",
    "bucketize_fragments",
    "build_report",
    "clock_status",
    "filter_report",
    "reconcile",
]
