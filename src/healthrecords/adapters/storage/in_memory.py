"""In-memory storage adapter for speed records."""

from collections.abc import AsyncIterable
from datetime import datetime

from healthrecords.core.models import SpeedRecord


# @tra: Adapter.InMemoryStorage.ImplementsSpeedRecordStoragePort
class InMemorySpeedRecordStorage:
    """In-memory implementation of SpeedRecordStoragePort.

    Stores speed records in a list. Suitable for testing and
    low-volume applications where persistence is not required.
    """

    def __init__(self) -> None:
        self._records: list[SpeedRecord] = []

    async def write(self, record: SpeedRecord) -> None:
        """Write a speed record to storage."""
        self._records.append(record)

    async def read(self, since: datetime | None = None) -> AsyncIterable[SpeedRecord]:
        """Read speed records measured after the given instant.

        Returns records with time > since, ordered by time ascending.
        """
        filtered = [r for r in self._records if since is None or r.time > since]
        for record in sorted(filtered, key=lambda r: r.time):
            yield record

    async def count(self) -> int:
        """Return total number of records in storage."""
        return len(self._records)

    async def clear(self) -> None:
        """Remove all records from storage."""
        self._records.clear()
