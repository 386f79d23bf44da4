from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal

from kubernetes import client
from kubernetes.utils import parse_quantity

from dashboard.models.k8s import (
    AggregateList,
    Node,
    NodeAllocatedResources,
    ObjectMeta,
    ResourceKind,
    TypeMeta,
)
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.common import empty_aggregate_list, to_aggregate_list
from dashboard.resource.correlate import pods_by_node
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery
from dashboard.resource.metric import MetricsClient
from dashboard.resource.reader import PRIMARY, REQUIRED, read_channels
from dashboard.resource.status import POD_FAILED, POD_SUCCEEDED

logger = logging.getLogger(__name__)

_TERMINAL_PHASES = (POD_SUCCEEDED, POD_FAILED)


def get_node_allocated_resources(
    node: client.V1Node, pods: Sequence[client.V1Pod]
) -> NodeAllocatedResources:
    active_pods = [
        pod for pod in pods if not (pod.status and pod.status.phase in _TERMINAL_PHASES)
    ]
    cpu_requests = Decimal(0)
    cpu_limits = Decimal(0)
    memory_requests = Decimal(0)
    memory_limits = Decimal(0)
    for pod in active_pods:
        for container in (pod.spec.containers if pod.spec else None) or []:
            resources = container.resources
            if resources is None:
                continue
            cpu_requests += _quantity(resources.requests, "cpu")
            cpu_limits += _quantity(resources.limits, "cpu")
            memory_requests += _quantity(resources.requests, "memory")
            memory_limits += _quantity(resources.limits, "memory")

    allocatable = node.status.allocatable if node.status else None
    cpu_capacity = _quantity(allocatable, "cpu")
    memory_capacity = _quantity(allocatable, "memory")
    pod_capacity = int(_quantity(allocatable, "pods"))

    return NodeAllocatedResources(
        cpu_requests=_millis(cpu_requests),
        cpu_requests_fraction=_fraction(cpu_requests, cpu_capacity),
        cpu_limits=_millis(cpu_limits),
        cpu_limits_fraction=_fraction(cpu_limits, cpu_capacity),
        cpu_capacity=_millis(cpu_capacity),
        memory_requests=int(memory_requests),
        memory_requests_fraction=_fraction(memory_requests, memory_capacity),
        memory_limits=int(memory_limits),
        memory_limits_fraction=_fraction(memory_limits, memory_capacity),
        memory_capacity=int(memory_capacity),
        allocated_pods=len(active_pods),
        pod_capacity=pod_capacity,
        pod_fraction=_fraction(Decimal(len(active_pods)), Decimal(pod_capacity)),
    )


def get_node_ready(node: client.V1Node) -> str:
    conditions = node.status.conditions if node.status else None
    for condition in conditions or []:
        if condition.type == "Ready":
            return condition.status or "Unknown"
    return "Unknown"


def to_node(node: client.V1Node, pods: Sequence[client.V1Pod]) -> Node:
    return Node(
        object_meta=ObjectMeta.from_k8s(node.metadata),
        type_meta=TypeMeta(kind=ResourceKind.NODE),
        ready=get_node_ready(node),
        unschedulable=bool(node.spec.unschedulable) if node.spec else False,
        allocated_resources=get_node_allocated_resources(node, pods),
    )


def create_node_list(
    nodes: Sequence[client.V1Node],
    pods: Sequence[client.V1Pod],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    scheduled = pods_by_node(pods)
    summaries = [
        to_node(node, scheduled.get(node.metadata.name if node.metadata else "", []))
        for node in nodes
    ]
    return to_aggregate_list(ResourceKind.NODE, summaries, query, metrics_client)


def get_node_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(channels, {"node_list": PRIMARY, "pod_list": REQUIRED})
    if results is None:
        return empty_aggregate_list(ResourceKind.NODE)
    return create_node_list(results["node_list"], results["pod_list"], query, metrics_client)


def _quantity(values: Mapping[str, str] | None, name: str) -> Decimal:
    if not values or name not in values:
        return Decimal(0)
    try:
        return parse_quantity(values[name])
    except ValueError as exc:
        logger.warning("Ignoring unparsable %s quantity %r: %s", name, values[name], exc)
        return Decimal(0)


def _millis(value: Decimal) -> int:
    return int(value * 1000)


def _fraction(used: Decimal, capacity: Decimal) -> float:
    if capacity <= 0:
        return 0.0
    return round(float(used / capacity * 100), 2)
