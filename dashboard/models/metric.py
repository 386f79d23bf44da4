from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

SUM_AGGREGATION = "sum"


@dataclass(frozen=True)
class MetricSample:
    """Single value returned by a metrics collaborator for one resource."""

    metric_name: str
    value: float
    timestamp: datetime | None = None


@dataclass(frozen=True)
class DataPoint:
    x: int
    y: float


@dataclass(frozen=True)
class Metric:
    metric_name: str
    aggregation: str = SUM_AGGREGATION
    data_points: list[DataPoint] = field(default_factory=list)
