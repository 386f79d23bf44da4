from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from kubernetes import client

from dashboard.models.k8s import AggregateList, PropertyName, ResourceKind
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.common import empty_aggregate_list, to_aggregate_list
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery, SortBy
from dashboard.resource.metric import MetricsClient
from dashboard.resource.reader import PRIMARY, read_channels
from dashboard.resource.status import to_event

# Newest first unless the caller asks for something else.
DEFAULT_EVENT_SORT = (SortBy(PropertyName.LAST_SEEN, ascending=False),)


def create_event_list(
    events: Sequence[client.CoreV1Event],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    if not query.sort_query:
        query = replace(query, sort_query=DEFAULT_EVENT_SORT)
    summaries = [to_event(event) for event in events]
    return to_aggregate_list(ResourceKind.EVENT, summaries, query, metrics_client)


def get_event_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(channels, {"event_list": PRIMARY})
    if results is None:
        return empty_aggregate_list(ResourceKind.EVENT)
    return create_event_list(results["event_list"], query, metrics_client)
