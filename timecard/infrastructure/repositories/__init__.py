# ==============================================================================
# Event Store Adapters
# ==============================================================================
"""
Storage adapters implementing the repository interfaces from base/repositories.py.

Currently supported:
- CSV file (csvfile.py)
"""

from timecard.infrastructure.repositories.csvfile import CsvEventRepository

__all__ = [
    "CsvEventRepository",
]
