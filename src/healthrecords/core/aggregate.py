"""Aggregate metric identifiers.

An AggregateMetric names a statistic over one field of one record type. It
carries no behavior: aggregation engines look results up by it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class AggregationType(Enum):
    """Reduction applied to a field across many records."""

    AVERAGE = "avg"
    MINIMUM = "min"
    MAXIMUM = "max"


@dataclass(frozen=True)
class AggregateMetric(Generic[T]):
    """Typed key identifying an aggregated value of a record field.

    Attributes:
        data_type_name: Record type the metric applies to (e.g., "Speed").
        aggregation_type: The reduction (average, minimum or maximum).
        field_name: Record field being reduced (e.g., "speed").
        result_type: Python type of the aggregated value.
    """

    data_type_name: str
    aggregation_type: AggregationType
    field_name: str
    result_type: type[T]

    @property
    def metric_key(self) -> str:
        """Stable string key, e.g. ``Speed_speed_avg``."""
        return f"{self.data_type_name}_{self.field_name}_{self.aggregation_type.value}"


def double_metric(
    data_type_name: str,
    aggregation_type: AggregationType,
    field_name: str,
) -> AggregateMetric[float]:
    """Create a metric whose aggregated value is a float.

    Args:
        data_type_name: Record type name (e.g., "Speed")
        aggregation_type: Reduction to apply
        field_name: Field to reduce (e.g., "speed")

    Returns:
        AggregateMetric with float result type
    """
    return AggregateMetric(
        data_type_name=data_type_name,
        aggregation_type=aggregation_type,
        field_name=field_name,
        result_type=float,
    )
