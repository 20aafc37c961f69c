"""BDD step definitions for speed record features."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from pytest_bdd import given, parsers, then, when

from healthrecords.core.models import Metadata, SpeedRecord


@dataclass
class SpeedScenarioContext:
    """Mutable state shared between steps of one scenario."""

    time: datetime | None = None
    records: list[SpeedRecord] = field(default_factory=list)
    error: Exception | None = None
    record_type: type[SpeedRecord] | None = None


@pytest.fixture
def ctx() -> SpeedScenarioContext:
    """Fresh scenario context for each test."""
    return SpeedScenarioContext()


def _require_time(ctx: SpeedScenarioContext) -> datetime:
    assert ctx.time is not None, "scenario must set a measurement time first"
    return ctx.time


# === Given ===


@given("a measurement time T0")
def step_time_t0(ctx: SpeedScenarioContext) -> None:
    ctx.time = datetime(2024, 5, 1, 8, 30, tzinfo=timezone.utc)


@given("the speed record type")
def step_speed_type(ctx: SpeedScenarioContext) -> None:
    ctx.record_type = SpeedRecord


# === When ===


@when(
    parsers.re(
        r"I record (?:a|another) speed of (?P<speed>[-\d.]+) m/s at T0 with a UTC offset"
    )
)
def step_record_with_utc(ctx: SpeedScenarioContext, speed: str) -> None:
    ctx.records.append(SpeedRecord(float(speed), _require_time(ctx), timezone.utc))


@when(parsers.parse("I try to record a speed of {speed:g} m/s at T0"))
def step_try_record(ctx: SpeedScenarioContext, speed: float) -> None:
    try:
        ctx.records.append(SpeedRecord(speed, _require_time(ctx)))
    except ValueError as exc:
        ctx.error = exc


# === Then ===


@then(parsers.parse("the record speed is {speed:g} m/s"))
def step_check_speed(ctx: SpeedScenarioContext, speed: float) -> None:
    assert ctx.records[0].speed_meters_per_second == speed


@then("the record time is T0")
def step_check_time(ctx: SpeedScenarioContext) -> None:
    assert ctx.records[0].time == ctx.time


@then("the record zone offset is UTC")
def step_check_offset(ctx: SpeedScenarioContext) -> None:
    assert ctx.records[0].zone_offset == timezone.utc


@then("the record metadata is empty")
def step_check_metadata(ctx: SpeedScenarioContext) -> None:
    assert ctx.records[0].metadata == Metadata.EMPTY


@then("the two records are equal")
def step_records_equal(ctx: SpeedScenarioContext) -> None:
    first, second = ctx.records
    assert first == second


@then("the two records are not equal")
def step_records_not_equal(ctx: SpeedScenarioContext) -> None:
    first, second = ctx.records
    assert first != second


@then("the two records have the same hash")
def step_records_same_hash(ctx: SpeedScenarioContext) -> None:
    first, second = ctx.records
    assert hash(first) == hash(second)


@then("the record is rejected with a ValueError")
def step_rejected(ctx: SpeedScenarioContext) -> None:
    assert isinstance(ctx.error, ValueError)
    assert ctx.records == []


@then("the record is accepted")
def step_accepted(ctx: SpeedScenarioContext) -> None:
    assert ctx.error is None
    assert len(ctx.records) == 1


@then(parsers.parse('the {name} metric has key "{key}"'))
def step_metric_key(ctx: SpeedScenarioContext, name: str, key: str) -> None:
    assert ctx.record_type is not None
    metric = getattr(ctx.record_type, name)
    assert metric.metric_key == key
    assert metric.data_type_name == "Speed"
    assert metric.field_name == "speed"
