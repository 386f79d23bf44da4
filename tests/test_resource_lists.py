from __future__ import annotations

import pytest
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from dashboard.models.k8s import PropertyName, ResourceIdentity, ResourceKind
from dashboard.models.metric import MetricSample
from dashboard.resource.dataselect import DataSelectQuery, MetricQuery, SortBy
from dashboard.resource.event import get_event_list_from_channels
from dashboard.resource.node import get_node_allocated_resources, get_node_list_from_channels
from dashboard.resource.pod import get_pod_list_from_channels
from dashboard.resource.service import get_service_list_from_channels
from dashboard.schemas.resources import ResourceListResponse
from tests.factories import make_event, make_pod, object_meta, ts


class _StaticMetricsClient:
    def get_metrics(self, identity: ResourceIdentity) -> list[MetricSample]:
        return [MetricSample(metric_name="cpu", value=250.0, timestamp=ts(60))]


def _node(name: str, *, ready: str = "True", unschedulable: bool = False) -> client.V1Node:
    return client.V1Node(
        metadata=client.V1ObjectMeta(name=name, uid=f"{name}-uid"),
        spec=client.V1NodeSpec(unschedulable=unschedulable),
        status=client.V1NodeStatus(
            allocatable={"cpu": "4", "memory": "8Gi", "pods": "110"},
            conditions=[client.V1NodeCondition(type="Ready", status=ready)],
        ),
    )


def test_pod_list_summarizes_pods(channels_factory) -> None:
    crashing = make_pod("crashing", node_name="node-a", restarts=3)
    terminating = make_pod("terminating")
    terminating.metadata.deletion_timestamp = ts(10)
    events = [make_event("backoff", crashing), make_event("backoff-again", crashing)]
    channels = channels_factory(pod_list=[crashing, terminating], event_list=events)

    result = get_pod_list_from_channels(channels)

    assert result.kind is ResourceKind.POD
    assert result.list_meta.total_items == 2
    first, second = result.items
    assert first.status == "Running"
    assert first.restart_count == 3
    assert first.node_name == "node-a"
    assert [warning.object_meta.name for warning in first.warnings] == [
        "backoff",
        "backoff-again",
    ]
    assert second.status == "Terminating"
    assert second.warnings == []


def test_pod_list_not_found_is_empty(channels_factory) -> None:
    channels = channels_factory(
        pod_list=ApiException(status=404, reason="Not Found"), event_list=[]
    )

    result = get_pod_list_from_channels(channels)

    assert result.list_meta.total_items == 0
    assert result.items == []


def test_pod_list_attaches_cumulative_metrics(channels_factory) -> None:
    channels = channels_factory(pod_list=[make_pod("a"), make_pod("b")], event_list=[])
    query = DataSelectQuery(metric_query=MetricQuery(metric_names=("cpu",)))

    result = get_pod_list_from_channels(channels, query, _StaticMetricsClient())

    assert len(result.cumulative_metrics) == 1
    metric = result.cumulative_metrics[0]
    assert metric.metric_name == "cpu"
    assert metric.data_points[0].y == 500.0
    assert metric.data_points[0].x == 60


def test_node_allocated_resources_skip_terminal_pods() -> None:
    node = _node("node-a")
    pods = [
        make_pod(
            "active",
            node_name="node-a",
            requests={"cpu": "500m", "memory": "1Gi"},
            limits={"cpu": "1", "memory": "2Gi"},
        ),
        make_pod(
            "done",
            node_name="node-a",
            phase="Succeeded",
            requests={"cpu": "2", "memory": "4Gi"},
        ),
    ]

    allocated = get_node_allocated_resources(node, pods)

    assert allocated.cpu_requests == 500
    assert allocated.cpu_requests_fraction == 12.5
    assert allocated.cpu_limits == 1000
    assert allocated.cpu_limits_fraction == 25.0
    assert allocated.cpu_capacity == 4000
    assert allocated.memory_requests == 1024**3
    assert allocated.memory_requests_fraction == 12.5
    assert allocated.memory_limits_fraction == 25.0
    assert allocated.memory_capacity == 8 * 1024**3
    assert allocated.allocated_pods == 1
    assert allocated.pod_capacity == 110
    assert allocated.pod_fraction == 0.91


def test_node_allocated_resources_ignore_bad_quantities() -> None:
    node = _node("node-a")
    pod = make_pod("odd", node_name="node-a", requests={"cpu": "lots"})

    allocated = get_node_allocated_resources(node, [pod])

    assert allocated.cpu_requests == 0
    assert allocated.allocated_pods == 1


def test_node_list_matches_pods_by_node_name(channels_factory) -> None:
    pods = [
        make_pod("a-1", node_name="node-a", requests={"cpu": "1"}),
        make_pod("b-1", node_name="node-b", requests={"cpu": "2"}),
        make_pod("unscheduled", phase="Pending"),
    ]
    channels = channels_factory(
        node_list=[_node("node-a"), _node("node-b", ready="False", unschedulable=True)],
        pod_list=pods,
    )

    result = get_node_list_from_channels(channels)

    assert result.kind is ResourceKind.NODE
    node_a, node_b = result.items
    assert node_a.ready == "True"
    assert node_a.allocated_resources.cpu_requests == 1000
    assert node_b.ready == "False"
    assert node_b.unschedulable is True
    assert node_b.allocated_resources.cpu_requests == 2000


def test_node_list_requires_pods(channels_factory) -> None:
    error = ApiException(status=403, reason="Forbidden")
    channels = channels_factory(node_list=[_node("node-a")], pod_list=error)

    with pytest.raises(ApiException) as excinfo:
        get_node_list_from_channels(channels)

    assert excinfo.value is error


def test_service_list_builds_endpoints(channels_factory) -> None:
    service = client.V1Service(
        metadata=object_meta("web", namespace="shop"),
        spec=client.V1ServiceSpec(
            type="LoadBalancer",
            cluster_ip="10.0.0.10",
            selector={"app": "web"},
            ports=[client.V1ServicePort(port=80, protocol="TCP", node_port=30080)],
        ),
        status=client.V1ServiceStatus(
            load_balancer=client.V1LoadBalancerStatus(
                ingress=[
                    client.V1LoadBalancerIngress(ip="203.0.113.7"),
                    client.V1LoadBalancerIngress(hostname="web.example.com"),
                ]
            )
        ),
    )
    channels = channels_factory(service_list=[service])

    result = get_service_list_from_channels(channels)

    summary = result.items[0]
    assert summary.type == "LoadBalancer"
    assert summary.cluster_ip == "10.0.0.10"
    assert summary.selector == {"app": "web"}
    assert summary.internal_endpoint.host == "web.shop"
    assert summary.internal_endpoint.ports[0].node_port == 30080
    assert [endpoint.host for endpoint in summary.external_endpoints] == [
        "203.0.113.7",
        "web.example.com",
    ]


def test_service_list_failure_propagates(channels_factory) -> None:
    error = RuntimeError("boom")
    channels = channels_factory(service_list=error)

    with pytest.raises(RuntimeError) as excinfo:
        get_service_list_from_channels(channels)

    assert excinfo.value is error


def test_event_list_defaults_to_newest_first(channels_factory) -> None:
    pod = make_pod("web-1")
    events = [
        make_event("old", pod, last_seen=ts(100)),
        make_event("new", pod, last_seen=ts(300)),
        make_event("undated", pod),
    ]
    channels = channels_factory(event_list=events)

    result = get_event_list_from_channels(channels)

    assert [item.object_meta.name for item in result.items] == ["new", "old", "undated"]
    assert result.items[0].involved_object_name == "web-1"


def test_event_list_keeps_requested_sort(channels_factory) -> None:
    pod = make_pod("web-1")
    events = [make_event("b", pod, last_seen=ts(100)), make_event("a", pod, last_seen=ts(300))]
    channels = channels_factory(event_list=events)
    query = DataSelectQuery(sort_query=(SortBy(PropertyName.NAME),))

    result = get_event_list_from_channels(channels, query)

    assert [item.object_meta.name for item in result.items] == ["a", "b"]


def test_node_list_not_found_skips_failing_pod_channel(channels_factory) -> None:
    channels = channels_factory(
        node_list=ApiException(status=404, reason="Not Found"),
        pod_list=RuntimeError("pods down"),
    )

    result = get_node_list_from_channels(channels)

    assert result.kind is ResourceKind.NODE
    assert result.list_meta.total_items == 0
    assert result.items == []


def test_pod_list_metrics_serialize_into_response(channels_factory) -> None:
    channels = channels_factory(pod_list=[make_pod("a")], event_list=[])
    query = DataSelectQuery(metric_query=MetricQuery(metric_names=("cpu",)))
    aggregate = get_pod_list_from_channels(channels, query, _StaticMetricsClient())

    response = ResourceListResponse.from_aggregate(aggregate)

    assert response.kind == "pod"
    assert response.list_meta.total_items == 1
    assert [metric.metric_name for metric in response.cumulative_metrics] == ["cpu"]
    assert response.cumulative_metrics[0].aggregation == "sum"
    assert response.cumulative_metrics[0].data_points[0].x == 60
    assert response.cumulative_metrics[0].data_points[0].y == 250.0
