"""Port interfaces for records and storage adapters.

These protocols define the contracts that records and storage adapters must
implement. The core domain depends only on these interfaces, not concrete
implementations.
"""

from collections.abc import AsyncIterable
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from healthrecords.core.models import Metadata, SpeedRecord


@runtime_checkable
class InstantaneousRecord(Protocol):
    """A record describing a single point in time."""

    time: datetime
    zone_offset: timezone | None
    metadata: Metadata


@runtime_checkable
class SpeedRecordStoragePort(Protocol):
    """Port for speed record storage operations.

    Examples: InMemorySpeedRecordStorage, SQLiteSpeedRecordStorage.
    """

    async def write(self, record: SpeedRecord) -> None:
        """Write a speed record to storage."""
        ...

    def read(self, since: datetime | None = None) -> AsyncIterable[SpeedRecord]:
        """Read speed records measured after the given instant.

        Args:
            since: Aware datetime. Returns records with time > since.
                   Default None returns all records.

        Returns:
            Async iterable of SpeedRecord objects, ordered by time ascending.
        """
        ...
