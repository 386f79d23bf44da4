from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dashboard.models.k8s import PropertyName
from dashboard.resource.dataselect import (
    DataSelectQuery,
    FilterBy,
    MetricQuery,
    PaginationQuery,
    SortBy,
)

_ASCENDING = "a"
_DESCENDING = "d"


class DataSelectParams(BaseModel):
    """Raw list query parameters, e.g. `sortBy=d,creationTimestamp&filterBy=name,web`."""

    filter_by: str | None = Field(default=None, alias="filterBy")
    sort_by: str | None = Field(default=None, alias="sortBy")
    items_per_page: int | None = Field(default=None, alias="itemsPerPage")
    page: int = Field(default=1, ge=1)
    metric_names: str | None = Field(default=None, alias="metricNames")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_query(self, default_items_per_page: int = 0) -> DataSelectQuery:
        items_per_page = self.items_per_page
        if items_per_page is None:
            items_per_page = default_items_per_page
        return DataSelectQuery(
            filter_query=parse_filter_query(self.filter_by),
            sort_query=parse_sort_query(self.sort_by),
            pagination_query=PaginationQuery(items_per_page=items_per_page, page=self.page),
            metric_query=MetricQuery(metric_names=_split(self.metric_names)),
        )


def parse_filter_query(value: str | None) -> tuple[FilterBy, ...]:
    """Parse `property,value[,property,value...]`. A value wrapped in quotes must match exactly."""
    parts = _split(value)
    if len(parts) % 2:
        raise ValueError("filterBy expects property,value pairs")
    clauses = []
    for idx in range(0, len(parts), 2):
        raw_value = parts[idx + 1]
        exact = len(raw_value) >= 2 and raw_value[0] == raw_value[-1] == '"'
        clauses.append(
            FilterBy(
                property=_property(parts[idx], "filterBy"),
                value=raw_value[1:-1] if exact else raw_value,
                exact=exact,
            )
        )
    return tuple(clauses)


def parse_sort_query(value: str | None) -> tuple[SortBy, ...]:
    """Parse `a|d,property[,a|d,property...]`."""
    parts = _split(value)
    if len(parts) % 2:
        raise ValueError("sortBy expects direction,property pairs")
    sorts = []
    for idx in range(0, len(parts), 2):
        direction = parts[idx]
        if direction not in (_ASCENDING, _DESCENDING):
            raise ValueError(f"sortBy direction must be 'a' or 'd', got {direction!r}")
        sorts.append(
            SortBy(property=_property(parts[idx + 1], "sortBy"), ascending=direction == _ASCENDING)
        )
    return tuple(sorts)


def _property(value: str, param: str) -> PropertyName:
    try:
        return PropertyName(value)
    except ValueError as exc:
        raise ValueError(f"{param}: unsupported property {value!r}") from exc


def _split(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())
