# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external resources (ports-and-adapters architecture).

This module contains concrete implementations of the base interfaces:
- repositories/ - Event store adapters (CSV file)
"""

from timecard.infrastructure.repositories import CsvEventRepository

__all__ = [
    "CsvEventRepository",
]
