"""Tests for in-memory speed record storage."""

from collections.abc import Callable

import pytest

from healthrecords.adapters.storage.in_memory import InMemorySpeedRecordStorage
from healthrecords.core.models import SpeedRecord

RecordFactory = Callable[..., SpeedRecord]


@pytest.mark.storage
class TestInMemorySpeedRecordStorage:
    """Tests for InMemorySpeedRecordStorage."""

    async def test_write_and_read_single_record(
        self, make_record: RecordFactory
    ) -> None:
        """A written record can be read back."""
        storage = InMemorySpeedRecordStorage()
        record = make_record()

        await storage.write(record)

        assert [r async for r in storage.read()] == [record]

    async def test_read_empty_storage(self) -> None:
        """Empty storage yields nothing."""
        storage = InMemorySpeedRecordStorage()
        assert [r async for r in storage.read()] == []

    async def test_read_orders_by_time(self, make_record: RecordFactory) -> None:
        """Records come back ordered by time, not insertion order."""
        storage = InMemorySpeedRecordStorage()
        late = make_record(speed=1.0, minutes=10)
        early = make_record(speed=2.0, minutes=1)
        await storage.write(late)
        await storage.write(early)

        assert [r async for r in storage.read()] == [early, late]

    async def test_read_since_is_exclusive(self, make_record: RecordFactory) -> None:
        """read(since) returns only records strictly after since."""
        storage = InMemorySpeedRecordStorage()
        first = make_record(minutes=0)
        second = make_record(minutes=5)
        await storage.write(first)
        await storage.write(second)

        assert [r async for r in storage.read(since=first.time)] == [second]

    async def test_count_and_clear(self, make_record: RecordFactory) -> None:
        """count() reflects writes and clear() empties storage."""
        storage = InMemorySpeedRecordStorage()
        await storage.write(make_record())
        await storage.write(make_record(minutes=1))
        assert await storage.count() == 2

        await storage.clear()

        assert await storage.count() == 0
