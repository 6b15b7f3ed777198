# ==============================================================================
# Timecard Exceptions
# ==============================================================================
"""
Exception hierarchy for the timecard package.

Anomalies in the event log are data, not exceptions; they are returned by the
reconciler. The exceptions here cover two other cases:
- Contract violations inside the core (bugs that must fail loudly)
- Failures in the outer layers (event store, clock commands)
"""


class TimecardError(Exception):
    """Base class for all timecard errors."""


# ==============================================================================
# Core Contract Violations
# ==============================================================================


class ContractViolation(TimecardError):
    """An internal invariant of the bucketing/aggregation core was broken."""


class UnknownPeriodKindError(ContractViolation):
    """A period kind with no alignment rule was requested."""

    def __init__(self, period_kind: object):
        super().__init__(f"No alignment rule for period kind {period_kind!r}")
        self.period_kind = period_kind


class FragmentOutOfBucketError(ContractViolation):
    """A session fragment extends outside the bucket that owns it."""

    def __init__(self, fragment: object, bucket_start: object, bucket_end: object):
        super().__init__(
            f"Fragment {fragment!r} leaves its bucket [{bucket_start}, {bucket_end})"
        )
        self.fragment = fragment


# ==============================================================================
# Event Store
# ==============================================================================


class EventStoreError(TimecardError):
    """The event store could not be read or written."""


class MalformedEventFileError(EventStoreError):
    """One or more rows of the event file failed validation."""

    def __init__(self, path: object, errors: list[str]):
        lines = "\n".join(f"  {e}" for e in errors)
        super().__init__(
            f"There are malformed entries in {path}. "
            f"Please fix them manually and try again:\n{lines}"
        )
        self.path = path
        self.errors = errors


# ==============================================================================
# Clock Commands
# ==============================================================================


class ClockError(TimecardError):
    """A clock in/out request was refused."""


class AlreadyClockedError(ClockError):
    """The requested direction matches the current status."""

    def __init__(self, direction: str):
        super().__init__(f"Already clocked {direction}")
        self.direction = direction


class ContinuityError(ClockError):
    """The requested entry would be placed before an existing entry."""

    def __init__(self, requested: object, next_entry: object):
        super().__init__(
            "Adding this entry would violate continuity! "
            "There is an entry after the given time.\n"
            f"Time given: {requested}\nNext entry: {next_entry}"
        )
        self.requested = requested
        self.next_entry = next_entry
