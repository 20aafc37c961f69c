"""Example: record speed measurements, store them and export as NDJSON.

Run with:
    python examples/record_speed.py
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from healthrecords import (
    DataOrigin,
    Device,
    DeviceType,
    Metadata,
    SpeedRecord,
    SQLiteSpeedRecordStorage,
    encode_records,
)

logging.basicConfig(level=logging.DEBUG)

METADATA = Metadata(
    data_origin=DataOrigin("com.example.running"),
    device=Device(manufacturer="Acme", model="Stride", type=DeviceType.WATCH),
)


async def main() -> None:
    storage = SQLiteSpeedRecordStorage(":memory:")
    start = datetime.now(timezone.utc)
    local_offset = timezone(timedelta(hours=1))

    for i, speed in enumerate([2.4, 2.9, 3.3, 3.1]):
        await storage.write(
            SpeedRecord(
                speed_meters_per_second=speed,
                time=start + timedelta(seconds=10 * i),
                zone_offset=local_offset,
                metadata=METADATA,
            )
        )

    records = [r async for r in storage.read()]
    print(encode_records(records), end="")

    # Metric identifiers an aggregation service keys its results on
    for metric in (SpeedRecord.AVG, SpeedRecord.MIN, SpeedRecord.MAX):
        print(metric.metric_key)

    await storage.close()


if __name__ == "__main__":
    asyncio.run(main())
