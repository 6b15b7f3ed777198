# ==============================================================================
# Tests for the Bucketer
# ==============================================================================
"""
Unit tests for splitting sessions into daily and weekly periods.

Tests cover:
- Local-midnight boundaries and the 23:50-00:10 split
- Gap filling between the first and last period with data
- Weekly alignment to the configured week-start day
- DST transitions (23h and 25h days)
- Fragment conservation, including seeded random logs
- Open sessions and zero-length sessions
- Unknown period kinds
"""

from datetime import datetime, timedelta, timezone

import pytest

from timecard.core.bucketer import bucket_bounds, bucketize, bucketize_fragments, check_fragment
from timecard.core.errors import FragmentOutOfBucketError, UnknownPeriodKindError
from timecard.core.models import Bucket, PeriodKind, SessionFragment, Weekday
from timecard.core.reconciler import reconcile


def _sessions(events, *pairs):
    return reconcile(events(*pairs)).sessions


def _fragments_of(buckets, session_id):
    return [f for b in buckets for f in b.fragments if f.session_id == session_id]


# ==============================================================================
# Daily Buckets
# ==============================================================================


class TestDaily:
    """Tests for daily bucketing."""

    def test_boundary_split(self, at, events, la):
        """23:50 to 00:10 local yields two 10-minute fragments in adjacent days."""
        sessions = _sessions(events, ("in", at(23, 50, tz=la)), ("out", at(0, 10, day=5, tz=la)))
        buckets = bucketize(sessions, PeriodKind.DAILY, la)

        assert len(buckets) == 2
        assert [b.period_start.date().day for b in buckets] == [4, 5]
        assert [len(b.fragments) for b in buckets] == [1, 1]
        durations = [b.fragments[0].duration for b in buckets]
        assert durations == [timedelta(minutes=10), timedelta(minutes=10)]
        assert sum(durations, timedelta(0)) == timedelta(minutes=20)

    def test_buckets_aligned_to_local_midnight(self, at, events, la):
        sessions = _sessions(events, ("in", at(9, tz=la)), ("out", at(10, tz=la)))
        bucket = bucketize(sessions, PeriodKind.DAILY, la)[0]
        assert bucket.period_start == datetime(2024, 3, 4, tzinfo=la)
        assert bucket.period_end == datetime(2024, 3, 5, tzinfo=la)

    def test_target_timezone_decides_the_day(self, at, events, la):
        """A UTC morning session is the previous evening in Los Angeles."""
        sessions = _sessions(events, ("in", at(2)), ("out", at(4)))
        bucket = bucketize(sessions, PeriodKind.DAILY, la)[0]
        assert bucket.period_start.date().day == 3

    def test_gap_days_emitted_empty(self, at, events, utc):
        """Days between data days appear with no fragments."""
        sessions = _sessions(
            events,
            ("in", at(8, day=4)),
            ("out", at(9, day=4)),
            ("in", at(8, day=6)),
            ("out", at(9, day=6)),
        )
        buckets = bucketize(sessions, PeriodKind.DAILY, utc)

        assert [b.period_start.day for b in buckets] == [4, 5, 6]
        assert buckets[1].fragments == ()
        assert buckets[1].session_ids == ()

    def test_no_leading_or_trailing_empty_buckets(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8, day=10)), ("out", at(9, day=10)))
        buckets = bucketize(sessions, PeriodKind.DAILY, utc)
        assert len(buckets) == 1

    def test_no_sessions(self, utc):
        assert bucketize([], PeriodKind.DAILY, utc) == []

    def test_accepts_period_kind_string(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8)), ("out", at(9)))
        assert bucketize(sessions, "daily", utc)[0].period_kind == PeriodKind.DAILY


# ==============================================================================
# Weekly Buckets
# ==============================================================================


class TestWeekly:
    """Tests for weekly bucketing and week-start alignment."""

    def test_monday_alignment(self, at, events, utc):
        """A Wednesday session lands in the week starting Monday."""
        sessions = _sessions(events, ("in", at(8, day=6)), ("out", at(9, day=6)))
        bucket = bucketize(sessions, PeriodKind.WEEKLY, utc)[0]
        assert bucket.period_start == datetime(2024, 3, 4, tzinfo=utc)
        assert bucket.period_end == datetime(2024, 3, 11, tzinfo=utc)

    def test_sunday_alignment(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8, day=6)), ("out", at(9, day=6)))
        bucket = bucketize(sessions, PeriodKind.WEEKLY, utc, week_start=Weekday.SUNDAY)[0]
        assert bucket.period_start == datetime(2024, 3, 3, tzinfo=utc)

    def test_session_crossing_week_boundary(self, at, events, utc):
        """Sunday 22:00 to Monday 02:00 splits across two weeks."""
        sessions = _sessions(events, ("in", at(22, day=10)), ("out", at(2, day=11)))
        buckets = bucketize(sessions, PeriodKind.WEEKLY, utc)
        assert [b.period_start.day for b in buckets] == [4, 11]
        assert [b.fragments[0].duration for b in buckets] == [timedelta(hours=2)] * 2

    def test_gap_weeks_emitted(self, at, events, utc):
        sessions = _sessions(
            events,
            ("in", at(8, day=4)),
            ("out", at(9, day=4)),
            ("in", at(8, day=20)),
            ("out", at(9, day=20)),
        )
        buckets = bucketize(sessions, PeriodKind.WEEKLY, utc)
        assert [b.period_start.day for b in buckets] == [4, 11, 18]


# ==============================================================================
# Bucket Bounds
# ==============================================================================


class TestBucketBounds:
    """Tests for the aligned period containing an instant."""

    def test_daily(self, at, utc):
        start, end = bucket_bounds(at(15), PeriodKind.DAILY, utc)
        assert start == datetime(2024, 3, 4, tzinfo=utc)
        assert end == datetime(2024, 3, 5, tzinfo=utc)

    def test_weekly_custom_start(self, at, utc):
        start, end = bucket_bounds(at(15, day=6), PeriodKind.WEEKLY, utc, Weekday.TUESDAY)
        assert start == datetime(2024, 3, 5, tzinfo=utc)
        assert end - start == timedelta(days=7)

    def test_week_start_day_itself(self, at, utc):
        """An instant on the week-start day opens a new week."""
        start, _ = bucket_bounds(at(0, day=4), PeriodKind.WEEKLY, utc)
        assert start.day == 4

    def test_unknown_kind(self, at, utc):
        with pytest.raises(UnknownPeriodKindError):
            bucket_bounds(at(15), "monthly", utc)


# ==============================================================================
# DST
# ==============================================================================


class TestDaylightSaving:
    """Tests around Los Angeles DST transitions in 2024."""

    def test_spring_forward_day_is_23_hours(self, at, events, la):
        sessions = _sessions(events, ("in", at(0, day=10, tz=la)), ("out", at(5, day=10, tz=la)))
        bucket = bucketize(sessions, PeriodKind.DAILY, la)[0]

        length = bucket.period_end.astimezone(timezone.utc) - bucket.period_start.astimezone(
            timezone.utc
        )
        assert length == timedelta(hours=23)
        # 00:00 PST to 05:00 PDT is four real hours
        assert bucket.fragments[0].duration == timedelta(hours=4)

    def test_fall_back_split_conserves_time(self, at, events, la):
        """A session across the 25-hour day splits without loss."""
        sessions = _sessions(
            events, ("in", at(20, day=2, month=11, tz=la)), ("out", at(6, day=4, month=11, tz=la))
        )
        buckets = bucketize(sessions, PeriodKind.DAILY, la)
        assert [b.period_start.day for b in buckets] == [2, 3, 4]
        assert buckets[1].fragments[0].duration == timedelta(hours=25)
        total = sum((f.duration for f in _fragments_of(buckets, 0)), timedelta(0))
        assert total == sessions[0].duration


# ==============================================================================
# Conservation and Special Sessions
# ==============================================================================


class TestFragments:
    """Tests for fragment conservation, open and zero-length sessions."""

    @pytest.mark.parametrize("kind", [PeriodKind.DAILY, PeriodKind.WEEKLY])
    def test_conservation(self, at, events, la, kind):
        """Fragments of each session add up to the session duration exactly."""
        sessions = _sessions(
            events,
            ("in", at(20, 17, second=3, day=4, tz=la)),
            ("out", at(4, 30, second=59, day=7, tz=la)),
            ("in", at(23, 59, second=59, day=9, tz=la)),
            ("out", at(0, 0, second=1, day=12, tz=la)),
        )
        buckets = bucketize(sessions, kind, la)
        for session_id, session in enumerate(sessions):
            fragments = _fragments_of(buckets, session_id)
            assert sum((f.duration for f in fragments), timedelta(0)) == session.duration

    @pytest.mark.parametrize("seed", range(100))
    @pytest.mark.parametrize("kind", [PeriodKind.DAILY, PeriodKind.WEEKLY])
    def test_conservation_on_random_logs(self, random_events, la, kind, seed):
        """Fragments conserve time and stay inside their buckets for any log."""
        now = datetime(2024, 3, 20, tzinfo=timezone.utc)
        sessions = reconcile(random_events(seed)).sessions
        buckets = bucketize(sessions, kind, la, now=now)

        for bucket in buckets:
            for fragment in bucket.fragments:
                check_fragment(fragment, bucket)
        for session_id, session in enumerate(sessions):
            fragments = _fragments_of(buckets, session_id)
            assert sum((f.duration for f in fragments), timedelta(0)) == session.duration_until(now)
            assert any(session_id in b.session_ids for b in buckets)

    def test_fragments_inside_their_bucket(self, at, events, la):
        sessions = _sessions(events, ("in", at(20, tz=la)), ("out", at(4, day=7, tz=la)))
        for bucket in bucketize(sessions, PeriodKind.DAILY, la):
            for fragment in bucket.fragments:
                check_fragment(fragment, bucket)

    def test_open_session_uses_now(self, at, events, utc):
        """An open session is clipped at now and marked provisional."""
        sessions = _sessions(events, ("in", at(22)))
        buckets = bucketize(sessions, PeriodKind.DAILY, utc, now=at(2, day=5))

        assert len(buckets) == 2
        assert all(b.provisional for b in buckets)
        assert all(f.provisional for b in buckets for f in b.fragments)
        total = sum((f.duration for b in buckets for f in b.fragments), timedelta(0))
        assert total == timedelta(hours=4)

    def test_closed_session_not_provisional(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8)), ("out", at(9)))
        assert not bucketize(sessions, PeriodKind.DAILY, utc)[0].provisional

    def test_zero_length_session_present_without_fragment(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8)), ("out", at(8)))
        buckets = bucketize(sessions, PeriodKind.DAILY, utc)

        assert len(buckets) == 1
        assert buckets[0].fragments == ()
        assert buckets[0].session_ids == (0,)
        assert [f.start for f in buckets[0].empty_fragments] == [at(8)]

    def test_naive_now_rejected(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8)))
        with pytest.raises(ValueError, match="timezone-aware"):
            bucketize(sessions, PeriodKind.DAILY, utc, now=datetime(2024, 3, 4, 9))

    def test_unknown_kind(self, at, events, utc):
        sessions = _sessions(events, ("in", at(8)), ("out", at(9)))
        with pytest.raises(UnknownPeriodKindError, match="monthly"):
            bucketize(sessions, "monthly", utc)

    def test_bucketize_fragments_resplits(self, at, events, utc):
        """Weekly fragments re-split by day match direct daily bucketing."""
        sessions = _sessions(events, ("in", at(20, day=4)), ("out", at(4, day=6)))
        weekly = bucketize(sessions, PeriodKind.WEEKLY, utc)
        daily = bucketize_fragments(weekly[0].fragments, PeriodKind.DAILY, utc)
        direct = bucketize(sessions, PeriodKind.DAILY, utc)
        assert daily == direct


class TestCheckFragment:
    """Tests for the fragment containment check."""

    def test_bucket_contains_is_half_open(self, at, la):
        start, end = bucket_bounds(at(12, tz=la), PeriodKind.DAILY, la)
        bucket = Bucket(period_kind=PeriodKind.DAILY, period_start=start, period_end=end)
        assert bucket.contains(start)
        assert bucket.contains(at(23, 59, tz=la))
        assert not bucket.contains(end)
        # 07:00 UTC is still the previous evening in Los Angeles
        assert not bucket.contains(at(7))

    def test_fragment_outside_bucket(self, at, utc):
        bucket = Bucket(
            period_kind=PeriodKind.DAILY,
            period_start=datetime(2024, 3, 4, tzinfo=utc),
            period_end=datetime(2024, 3, 5, tzinfo=utc),
        )
        fragment = SessionFragment(session_id=0, start=at(23), end=at(1, day=5))
        with pytest.raises(FragmentOutOfBucketError):
            check_fragment(fragment, bucket)

    def test_fragment_at_period_end(self, utc):
        """The period end is exclusive, even for an empty fragment."""
        end = datetime(2024, 3, 5, tzinfo=utc)
        bucket = Bucket(
            period_kind=PeriodKind.DAILY,
            period_start=datetime(2024, 3, 4, tzinfo=utc),
            period_end=end,
        )
        with pytest.raises(FragmentOutOfBucketError):
            check_fragment(SessionFragment(session_id=0, start=end, end=end), bucket)
