"""Core domain models for health records."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum, IntEnum
from typing import ClassVar

from healthrecords.core.aggregate import AggregateMetric, AggregationType, double_metric

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

MIN_SPEED_METERS_PER_SECOND = 0.0
MAX_SPEED_METERS_PER_SECOND = 1_000_000.0
MAX_ZONE_OFFSET = timedelta(hours=18)


class DeviceType(Enum):
    """Kind of device that captured a record."""

    UNKNOWN = "unknown"
    WATCH = "watch"
    PHONE = "phone"
    SCALE = "scale"
    RING = "ring"
    HEAD_MOUNTED = "head_mounted"
    FITNESS_BAND = "fitness_band"
    CHEST_STRAP = "chest_strap"
    SMART_DISPLAY = "smart_display"


class RecordingMethod(IntEnum):
    """How the data was captured."""

    UNKNOWN = 0
    ACTIVELY_RECORDED = 1
    AUTOMATICALLY_RECORDED = 2
    MANUAL_ENTRY = 3


@dataclass(frozen=True)
class Device:
    """Hardware a record was captured on.

    Attributes:
        manufacturer: Device manufacturer (e.g., "Google").
        model: Device model (e.g., "Pixel Watch").
        type: Device category.
    """

    manufacturer: str | None = None
    model: str | None = None
    type: DeviceType = DeviceType.UNKNOWN


@dataclass(frozen=True)
class DataOrigin:
    """Application a record originated from, by package name."""

    package_name: str


@dataclass(frozen=True)
class Metadata:
    """Provenance attached to every health record.

    Attributes:
        id: Unique identifier assigned once stored. Empty when not yet stored.
        data_origin: Application that wrote the record.
        last_modified_time: When the record was last written (UTC).
        client_record_id: Optional identifier from the writing client.
        client_record_version: Version of the record from the writing client.
        device: Optional device the data was captured on.
        recording_method: How the data was captured.
    """

    EMPTY: ClassVar["Metadata"]

    id: str = ""
    data_origin: DataOrigin = field(default_factory=lambda: DataOrigin(""))
    last_modified_time: datetime = EPOCH
    client_record_id: str | None = None
    client_record_version: int = 0
    device: Device | None = None
    recording_method: RecordingMethod = RecordingMethod.UNKNOWN

    def __post_init__(self) -> None:
        if self.last_modified_time.utcoffset() is None:
            raise ValueError("last_modified_time must be timezone-aware")
        object.__setattr__(
            self, "last_modified_time", self.last_modified_time.astimezone(timezone.utc)
        )


Metadata.EMPTY = Metadata()


def _validate_speed(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(
            f"speed_meters_per_second must be a real number, got {type(value).__name__}"
        )
    try:
        speed = float(value)
    except OverflowError:
        raise ValueError(
            "speed_meters_per_second must be in "
            f"[{MIN_SPEED_METERS_PER_SECOND}, {MAX_SPEED_METERS_PER_SECOND}], "
            f"got {value}"
        ) from None
    # NaN fails both range comparisons
    if math.isnan(speed):
        raise ValueError("speed_meters_per_second must not be NaN")
    if not MIN_SPEED_METERS_PER_SECOND <= speed <= MAX_SPEED_METERS_PER_SECOND:
        raise ValueError(
            "speed_meters_per_second must be in "
            f"[{MIN_SPEED_METERS_PER_SECOND}, {MAX_SPEED_METERS_PER_SECOND}], "
            f"got {speed}"
        )
    return speed


def _validate_zone_offset(zone_offset: timezone) -> None:
    offset = zone_offset.utcoffset(None)
    if offset % timedelta(seconds=1):
        raise ValueError(f"zone_offset must be whole seconds, got {zone_offset}")
    if abs(offset) > MAX_ZONE_OFFSET:
        raise ValueError(f"zone_offset must be within +/-18:00, got {zone_offset}")


# @tra: Core.SpeedRecord.Immutable
# @tra: Core.SpeedRecord.ValueEquality
@dataclass(frozen=True)
class SpeedRecord:
    """The user's speed at a single instant.

    The value is the scalar magnitude of the speed, so it is never negative.
    Equality and hashing cover all four fields, in declaration order.

    Attributes:
        speed_meters_per_second: Speed in meters per second, in [0, 1000000].
        time: Instant of the measurement, stored normalized to UTC.
        zone_offset: UTC offset in effect at capture time, or None if unknown.
        metadata: Provenance of the record. Defaults to Metadata.EMPTY.

    Raises:
        ValueError: If the speed is out of range or NaN, time is naive, or
            zone_offset is not whole seconds within +/-18:00.
        TypeError: If an argument has the wrong type.
    """

    AVG: ClassVar[AggregateMetric[float]] = double_metric(
        "Speed", AggregationType.AVERAGE, "speed"
    )
    MIN: ClassVar[AggregateMetric[float]] = double_metric(
        "Speed", AggregationType.MINIMUM, "speed"
    )
    MAX: ClassVar[AggregateMetric[float]] = double_metric(
        "Speed", AggregationType.MAXIMUM, "speed"
    )

    speed_meters_per_second: float
    time: datetime
    zone_offset: timezone | None = None
    metadata: Metadata = Metadata.EMPTY

    def __post_init__(self) -> None:
        # @tra: Core.SpeedRecord.RangeValidation
        object.__setattr__(
            self,
            "speed_meters_per_second",
            _validate_speed(self.speed_meters_per_second),
        )
        if not isinstance(self.time, datetime):
            raise TypeError(f"time must be a datetime, got {type(self.time).__name__}")
        if self.time.tzinfo is None or self.time.utcoffset() is None:
            raise ValueError("time must be timezone-aware")
        # Stored as UTC so equality and hashing compare instants
        object.__setattr__(self, "time", self.time.astimezone(timezone.utc))
        if self.zone_offset is not None and not isinstance(self.zone_offset, timezone):
            raise TypeError(
                "zone_offset must be a datetime.timezone or None, "
                f"got {type(self.zone_offset).__name__}"
            )
        if self.zone_offset is not None:
            _validate_zone_offset(self.zone_offset)
        if not isinstance(self.metadata, Metadata):
            raise TypeError(
                f"metadata must be Metadata, got {type(self.metadata).__name__}"
            )
