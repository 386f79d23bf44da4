from __future__ import annotations

from collections.abc import Sequence

from kubernetes import client

from dashboard.models.k8s import AggregateList, ObjectMeta, Pod, ResourceKind, TypeMeta
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.common import empty_aggregate_list, to_aggregate_list
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery
from dashboard.resource.metric import MetricsClient
from dashboard.resource.reader import BEST_EFFORT, PRIMARY, read_channels
from dashboard.resource.status import get_pod_status, get_pods_event_warnings, get_restart_count


def to_pod(pod: client.V1Pod, events: Sequence[client.CoreV1Event]) -> Pod:
    return Pod(
        object_meta=ObjectMeta.from_k8s(pod.metadata),
        type_meta=TypeMeta(kind=ResourceKind.POD),
        status=get_pod_status(pod),
        restart_count=get_restart_count(pod),
        node_name=(pod.spec.node_name or "") if pod.spec else "",
        warnings=get_pods_event_warnings(events, [pod]),
    )


def create_pod_list(
    pods: Sequence[client.V1Pod],
    events: Sequence[client.CoreV1Event],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    summaries = [to_pod(pod, events) for pod in pods]
    return to_aggregate_list(ResourceKind.POD, summaries, query, metrics_client)


def get_pod_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(channels, {"pod_list": PRIMARY, "event_list": BEST_EFFORT})
    if results is None:
        return empty_aggregate_list(ResourceKind.POD)
    return create_pod_list(results["pod_list"], results["event_list"], query, metrics_client)
