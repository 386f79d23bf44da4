from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from dashboard.models.k8s import AggregateList


class ListMetaResponse(BaseModel):
    total_items: int


class DataPointResponse(BaseModel):
    x: int
    y: float


class MetricResponse(BaseModel):
    metric_name: str
    aggregation: str
    data_points: list[DataPointResponse] = Field(default_factory=list)


class ResourceListResponse(BaseModel):
    kind: str
    list_meta: ListMetaResponse
    cumulative_metrics: list[MetricResponse] = Field(default_factory=list)
    items: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_aggregate(cls, aggregate: AggregateList) -> ResourceListResponse:
        return cls.model_validate(aggregate.to_dict())
