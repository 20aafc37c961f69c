"""NDJSON encoder and decoder for speed records."""

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from healthrecords.core.models import (
    DataOrigin,
    Device,
    DeviceType,
    Metadata,
    RecordingMethod,
    SpeedRecord,
)

logger = logging.getLogger(__name__)


def metadata_to_dict(metadata: Metadata) -> dict[str, Any]:
    """Convert Metadata to a JSON-serializable dict."""
    device = None
    if metadata.device is not None:
        device = {
            "manufacturer": metadata.device.manufacturer,
            "model": metadata.device.model,
            "type": metadata.device.type.value,
        }
    return {
        "id": metadata.id,
        "data_origin": metadata.data_origin.package_name,
        "last_modified_time": metadata.last_modified_time.isoformat(),
        "client_record_id": metadata.client_record_id,
        "client_record_version": metadata.client_record_version,
        "device": device,
        "recording_method": int(metadata.recording_method),
    }


def metadata_from_dict(data: dict[str, Any]) -> Metadata:
    """Build Metadata from a dict produced by metadata_to_dict.

    Missing keys fall back to the Metadata defaults.
    """
    if not isinstance(data, dict):
        raise TypeError(f"metadata must be a JSON object, got {type(data).__name__}")
    if not data:
        return Metadata.EMPTY
    device_data = data.get("device")
    device = None
    if device_data is not None:
        if not isinstance(device_data, dict):
            raise TypeError(
                f"device must be a JSON object, got {type(device_data).__name__}"
            )
        device = Device(
            manufacturer=device_data.get("manufacturer"),
            model=device_data.get("model"),
            type=DeviceType(device_data.get("type", DeviceType.UNKNOWN.value)),
        )
    defaults = Metadata.EMPTY
    last_modified = data.get("last_modified_time")
    return Metadata(
        id=data.get("id", defaults.id),
        data_origin=DataOrigin(data.get("data_origin", "")),
        last_modified_time=(
            datetime.fromisoformat(last_modified)
            if last_modified is not None
            else defaults.last_modified_time
        ),
        client_record_id=data.get("client_record_id"),
        client_record_version=data.get(
            "client_record_version", defaults.client_record_version
        ),
        device=device,
        recording_method=RecordingMethod(
            data.get("recording_method", RecordingMethod.UNKNOWN)
        ),
    )


def offset_seconds(zone_offset: timezone | None) -> int | None:
    """Return the offset in whole seconds, or None when absent."""
    if zone_offset is None:
        return None
    # A fixed-offset timezone ignores its argument
    return int(zone_offset.utcoffset(None).total_seconds())


def offset_from_seconds(seconds: int | None) -> timezone | None:
    if seconds is None:
        return None
    return timezone(timedelta(seconds=seconds))


def record_to_dict(record: SpeedRecord) -> dict[str, Any]:
    """Convert a SpeedRecord to a JSON-serializable dict."""
    return {
        "speed_meters_per_second": record.speed_meters_per_second,
        "time": record.time.astimezone(timezone.utc).isoformat(),
        "zone_offset_seconds": offset_seconds(record.zone_offset),
        "metadata": metadata_to_dict(record.metadata),
    }


def record_from_dict(data: dict[str, Any]) -> SpeedRecord:
    """Build a SpeedRecord from a dict produced by record_to_dict.

    Raises:
        KeyError: If a required key is missing.
        ValueError: If a value fails record validation.
        TypeError: If metadata or its device is not a JSON object.
    """
    metadata = data.get("metadata")
    return SpeedRecord(
        speed_meters_per_second=data["speed_meters_per_second"],
        time=datetime.fromisoformat(data["time"]),
        zone_offset=offset_from_seconds(data.get("zone_offset_seconds")),
        metadata=metadata_from_dict(metadata if metadata is not None else {}),
    )


def encode_records(records: Iterable[SpeedRecord]) -> str:
    """Encode speed records to newline-delimited JSON.

    Args:
        records: An iterable of SpeedRecord objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [json.dumps(record_to_dict(record)) for record in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"


def decode_records(text: str) -> list[SpeedRecord]:
    """Decode newline-delimited JSON into speed records.

    Blank lines are skipped.

    Args:
        text: NDJSON string, as produced by encode_records.

    Returns:
        List of SpeedRecord objects in input order.

    Raises:
        ValueError: If a line is not valid JSON or does not describe a valid
            record. The message includes the 1-based line number.
    """
    records: list[SpeedRecord] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            records.append(record_from_dict(data))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Rejected speed record on line %d: %s", lineno, exc)
            raise ValueError(f"Invalid speed record on line {lineno}: {exc}") from exc
    return records
