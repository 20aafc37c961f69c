"""healthrecords - immutable health records with aggregate metric identifiers."""

from healthrecords.adapters.storage.in_memory import InMemorySpeedRecordStorage
from healthrecords.adapters.storage.sqlite import SQLiteSpeedRecordStorage
from healthrecords.core.aggregate import AggregateMetric, AggregationType, double_metric
from healthrecords.core.encoding.ndjson import decode_records, encode_records
from healthrecords.core.models import (
    DataOrigin,
    Device,
    DeviceType,
    Metadata,
    RecordingMethod,
    SpeedRecord,
)
from healthrecords.core.ports import InstantaneousRecord, SpeedRecordStoragePort

__all__ = [
    # Models
    "DataOrigin",
    "Device",
    "DeviceType",
    "Metadata",
    "RecordingMethod",
    "SpeedRecord",
    # Aggregation
    "AggregateMetric",
    "AggregationType",
    "double_metric",
    # Ports
    "InstantaneousRecord",
    "SpeedRecordStoragePort",
    # Encoding
    "decode_records",
    "encode_records",
    # Storage
    "InMemorySpeedRecordStorage",
    "SQLiteSpeedRecordStorage",
]
