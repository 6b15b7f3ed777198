# ==============================================================================
# Repository Abstract Base Classes
# ==============================================================================
"""
Repository ABCs for event persistence.

These define the "what" (read and append clock events) not the "how".
Concrete implementations in infrastructure/ handle the specifics.

The store is append-only: events are never modified or deleted, and
``load()`` returns them in the order they were appended.
"""

from abc import ABC, abstractmethod

from timecard.core.models import Event


class EventRepository(ABC):
    """Repository for clock events."""

    @abstractmethod
    def exists(self) -> bool:
        """Whether the underlying store has been created yet."""
        ...

    @abstractmethod
    def load(self) -> list[Event]:
        """
        Read every event.

        Returns:
            Events in the order they were appended
        """
        ...

    @abstractmethod
    def append(self, event: Event) -> None:
        """
        Persist one event at the end of the store.

        Args:
            event: Event to append
        """
        ...

    def last_event(self) -> Event | None:
        """Most recent event by timestamp, or None when the store is empty."""
        events = self.load() if self.exists() else []
        if not events:
            return None
        return max(events, key=lambda e: e.timestamp)
