"""Storage adapters implementing core ports."""

from healthrecords.adapters.storage.in_memory import InMemorySpeedRecordStorage
from healthrecords.adapters.storage.sqlite import SQLiteSpeedRecordStorage

__all__ = [
    "InMemorySpeedRecordStorage",
    "SQLiteSpeedRecordStorage",
]
