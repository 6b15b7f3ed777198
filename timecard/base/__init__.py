# ==============================================================================
# Base Abstractions
# ==============================================================================
"""
Abstract interfaces implemented by the infrastructure layer.

- EventRepository: append-only clock event store
"""

from timecard.base.repositories import EventRepository

__all__ = [
    "EventRepository",
]
