"""Generic filter, sort, paginate and metric pipeline shared by every list builder."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from dashboard.models.k8s import PropertyName, ResourceIdentity
from dashboard.models.metric import Metric, MetricSample
from dashboard.resource.metric import MetricsClient, aggregate_samples, collect_samples


class DataCell(Protocol):
    def identity(self) -> ResourceIdentity:
        raise NotImplementedError

    def get_property(self, name: PropertyName) -> object | None:
        raise NotImplementedError


C = TypeVar("C", bound=DataCell)


@dataclass(frozen=True)
class FilterBy:
    property: PropertyName
    value: str
    exact: bool = False

    def matches(self, cell: DataCell) -> bool:
        actual = cell.get_property(self.property)
        if actual is None:
            return False
        text = actual.isoformat() if hasattr(actual, "isoformat") else str(actual)
        if self.exact:
            return text == self.value
        return self.value in text


@dataclass(frozen=True)
class SortBy:
    property: PropertyName
    ascending: bool = True


@dataclass(frozen=True)
class PaginationQuery:
    items_per_page: int = 0
    page: int = 1

    @property
    def enabled(self) -> bool:
        return self.items_per_page > 0

    def window(self, total: int) -> tuple[int, int]:
        start = self.items_per_page * (self.page - 1)
        end = self.items_per_page * self.page
        start = min(max(start, 0), total)
        end = min(max(end, start), total)
        return start, end


@dataclass(frozen=True)
class MetricQuery:
    metric_names: tuple[str, ...] = ()

    @property
    def requested(self) -> bool:
        return bool(self.metric_names)


NO_PAGINATION = PaginationQuery()
NO_METRICS = MetricQuery()


@dataclass(frozen=True)
class DataSelectQuery:
    filter_query: tuple[FilterBy, ...] = ()
    sort_query: tuple[SortBy, ...] = ()
    pagination_query: PaginationQuery = NO_PAGINATION
    metric_query: MetricQuery = NO_METRICS


NO_DATA_SELECT = DataSelectQuery()


@dataclass(frozen=True)
class DataSelection:
    items: list = field(default_factory=list)
    total_items: int = 0
    cumulative_metrics: list[Metric] = field(default_factory=list)


def filter_cells(cells: Sequence[C], filter_query: Sequence[FilterBy]) -> list[C]:
    if not filter_query:
        return list(cells)
    return [cell for cell in cells if all(clause.matches(cell) for clause in filter_query)]


def sort_cells(cells: Sequence[C], sort_query: Sequence[SortBy]) -> list[C]:
    ordered = list(cells)
    # Least significant key first; ties keep the order of later keys, then input order.
    for sort_by in reversed(sort_query):
        ordered.sort(
            key=lambda cell, prop=sort_by.property: _sort_key(cell.get_property(prop)),
            reverse=not sort_by.ascending,
        )
    return ordered


def paginate_cells(cells: Sequence[C], pagination: PaginationQuery) -> list[C]:
    if not pagination.enabled:
        return list(cells)
    start, end = pagination.window(len(cells))
    return list(cells[start:end])


def attach_metrics(
    cells: Sequence[DataCell],
    metric_query: MetricQuery,
    metrics_client: MetricsClient | None,
) -> list[Metric]:
    if not metric_query.requested or metrics_client is None:
        return []
    samples: list[MetricSample] = []
    for cell in cells:
        samples.extend(collect_samples(metrics_client, cell.identity()))
    return aggregate_samples(metric_query.metric_names, samples)


def select(
    cells: Sequence[C],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> DataSelection:
    filtered = filter_cells(cells, query.filter_query)
    total_items = len(filtered)
    ordered = sort_cells(filtered, query.sort_query)
    page = paginate_cells(ordered, query.pagination_query)
    metrics = attach_metrics(page, query.metric_query, metrics_client)
    return DataSelection(items=page, total_items=total_items, cumulative_metrics=metrics)


def _sort_key(value: object | None) -> tuple[int, object]:
    if value is None:
        return (0, "")
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    if hasattr(value, "timestamp"):
        return (1, value.timestamp())
    return (2, str(value))
