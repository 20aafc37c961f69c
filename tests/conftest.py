"""Shared test fixtures for all test modules."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from healthrecords.core.models import Metadata, SpeedRecord

T0 = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def records_db_path(tmp_path: Path) -> str:
    """Provide a temporary database path for speed record storage tests."""
    return str(tmp_path / "speed.db")


@pytest.fixture
def make_record() -> Callable[..., SpeedRecord]:
    """Factory fixture for SpeedRecord with sensible defaults.

    Usage:
        def test_something(make_record):
            record = make_record(speed=3.0, minutes=5)
    """

    def _make(
        speed: float = 2.5,
        minutes: int = 0,
        zone_offset: timezone | None = timezone.utc,
        metadata: Metadata = Metadata.EMPTY,
    ) -> SpeedRecord:
        return SpeedRecord(
            speed_meters_per_second=speed,
            time=T0 + timedelta(minutes=minutes),
            zone_offset=zone_offset,
            metadata=metadata,
        )

    return _make
