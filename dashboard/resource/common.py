from __future__ import annotations

import logging
from collections.abc import Sequence

from dashboard.models.k8s import AggregateList, ListMeta, ResourceKind
from dashboard.resource.dataselect import DataCell, DataSelectQuery, select
from dashboard.resource.metric import MetricsClient

logger = logging.getLogger(__name__)


def to_aggregate_list(
    kind: ResourceKind,
    summaries: Sequence[DataCell],
    query: DataSelectQuery,
    metrics_client: MetricsClient | None,
) -> AggregateList:
    selection = select(summaries, query, metrics_client)
    logger.debug(
        "Built %s list: %d of %d items", kind.value, len(selection.items), selection.total_items
    )
    return AggregateList(
        kind=kind,
        list_meta=ListMeta(total_items=selection.total_items),
        cumulative_metrics=selection.cumulative_metrics,
        items=selection.items,
    )


def empty_aggregate_list(kind: ResourceKind) -> AggregateList:
    return AggregateList(kind=kind)
