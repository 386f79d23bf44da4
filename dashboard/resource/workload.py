"""List builders for pod controllers such as replica sets and jobs."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from kubernetes import client

from dashboard.models.k8s import AggregateList, ObjectMeta, ResourceKind, TypeMeta, Workload
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.common import empty_aggregate_list, to_aggregate_list
from dashboard.resource.correlate import correlate, owner_key
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery
from dashboard.resource.metric import MetricsClient
from dashboard.resource.reader import BEST_EFFORT, PRIMARY, REQUIRED, read_channels
from dashboard.resource.status import get_container_images, get_pod_info


def _spec_replicas(obj: Any) -> int | None:
    return obj.spec.replicas if obj.spec else None


def _status_replicas(obj: Any) -> int | None:
    return obj.status.replicas if obj.status else None


def _desired_scheduled(obj: client.V1DaemonSet) -> int | None:
    return obj.status.desired_number_scheduled if obj.status else None


def _current_scheduled(obj: client.V1DaemonSet) -> int | None:
    return obj.status.current_number_scheduled if obj.status else None


def _job_parallelism(obj: client.V1Job) -> int | None:
    return obj.spec.parallelism if obj.spec else None


def _job_active(obj: client.V1Job) -> int | None:
    return obj.status.active if obj.status else None


@dataclass(frozen=True)
class WorkloadKind:
    kind: ResourceKind
    channel: str
    desired: Callable[[Any], int | None]
    current: Callable[[Any], int | None]


REPLICA_SET = WorkloadKind(
    ResourceKind.REPLICA_SET, "replica_set_list", _spec_replicas, _status_replicas
)
DEPLOYMENT = WorkloadKind(
    ResourceKind.DEPLOYMENT, "deployment_list", _spec_replicas, _status_replicas
)
STATEFUL_SET = WorkloadKind(
    ResourceKind.STATEFUL_SET, "stateful_set_list", _spec_replicas, _status_replicas
)
DAEMON_SET = WorkloadKind(
    ResourceKind.DAEMON_SET, "daemon_set_list", _desired_scheduled, _current_scheduled
)
JOB = WorkloadKind(
    ResourceKind.JOB, "job_list", _job_parallelism, _job_active
)


def to_workload(
    workload_kind: WorkloadKind,
    obj: Any,
    pods: Sequence[client.V1Pod],
    events: Sequence[client.CoreV1Event],
) -> Workload:
    template = obj.spec.template if obj.spec else None
    return Workload(
        object_meta=ObjectMeta.from_k8s(obj.metadata),
        type_meta=TypeMeta(kind=workload_kind.kind),
        pods=get_pod_info(workload_kind.current(obj), workload_kind.desired(obj), pods, events),
        container_images=get_container_images(template),
    )


def create_workload_list(
    workload_kind: WorkloadKind,
    objects: Sequence[Any],
    pods: Sequence[client.V1Pod],
    events: Sequence[client.CoreV1Event],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    owned = correlate(objects, pods)
    workloads = [
        to_workload(workload_kind, obj, owned[owner_key(obj)], events) for obj in objects
    ]
    return to_aggregate_list(workload_kind.kind, workloads, query, metrics_client)


def create_deployment_list(
    deployments: Sequence[client.V1Deployment],
    replica_sets: Sequence[client.V1ReplicaSet],
    pods: Sequence[client.V1Pod],
    events: Sequence[client.CoreV1Event],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    """Deployments reach their pods through the replica sets they control."""
    owned_replica_sets = correlate(deployments, replica_sets)
    pods_by_replica_set = correlate(replica_sets, pods)
    workloads = []
    for deployment in deployments:
        deployment_pods = [
            pod
            for replica_set in owned_replica_sets[owner_key(deployment)]
            for pod in pods_by_replica_set[owner_key(replica_set)]
        ]
        workloads.append(to_workload(DEPLOYMENT, deployment, deployment_pods, events))
    return to_aggregate_list(ResourceKind.DEPLOYMENT, workloads, query, metrics_client)


def get_workload_list_from_channels(
    workload_kind: WorkloadKind,
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(
        channels,
        {
            workload_kind.channel: PRIMARY,
            "pod_list": REQUIRED,
            "event_list": BEST_EFFORT,
        },
    )
    if results is None:
        return empty_aggregate_list(workload_kind.kind)
    return create_workload_list(
        workload_kind,
        results[workload_kind.channel],
        results["pod_list"],
        results["event_list"],
        query,
        metrics_client,
    )


def get_replica_set_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    return get_workload_list_from_channels(REPLICA_SET, channels, query, metrics_client)


def get_daemon_set_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    return get_workload_list_from_channels(DAEMON_SET, channels, query, metrics_client)


def get_stateful_set_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    return get_workload_list_from_channels(STATEFUL_SET, channels, query, metrics_client)


def get_job_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    return get_workload_list_from_channels(JOB, channels, query, metrics_client)


def get_deployment_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(
        channels,
        {
            DEPLOYMENT.channel: PRIMARY,
            "replica_set_list": REQUIRED,
            "pod_list": REQUIRED,
            "event_list": BEST_EFFORT,
        },
    )
    if results is None:
        return empty_aggregate_list(DEPLOYMENT.kind)
    return create_deployment_list(
        results[DEPLOYMENT.channel],
        results["replica_set_list"],
        results["pod_list"],
        results["event_list"],
        query,
        metrics_client,
    )

