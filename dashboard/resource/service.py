from __future__ import annotations

from collections.abc import Sequence

from kubernetes import client

from dashboard.models.k8s import (
    AggregateList,
    Endpoint,
    ObjectMeta,
    ResourceKind,
    Service,
    ServicePort,
    TypeMeta,
)
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.common import empty_aggregate_list, to_aggregate_list
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery
from dashboard.resource.metric import MetricsClient
from dashboard.resource.reader import PRIMARY, read_channels


def get_internal_endpoint(service: client.V1Service) -> Endpoint:
    metadata = service.metadata
    name = metadata.name if metadata else ""
    namespace = metadata.namespace if metadata else ""
    host = name if not namespace else f"{name}.{namespace}"
    return Endpoint(host=host, ports=_service_ports(service))


def get_external_endpoints(service: client.V1Service) -> list[Endpoint]:
    status = service.status
    load_balancer = status.load_balancer if status else None
    ingress = load_balancer.ingress if load_balancer else None
    ports = _service_ports(service)
    return [
        Endpoint(host=item.hostname or item.ip or "", ports=ports)
        for item in ingress or []
        if item.hostname or item.ip
    ]


def to_service(service: client.V1Service) -> Service:
    spec = service.spec
    return Service(
        object_meta=ObjectMeta.from_k8s(service.metadata),
        type_meta=TypeMeta(kind=ResourceKind.SERVICE),
        type=(spec.type or "ClusterIP") if spec else "ClusterIP",
        cluster_ip=(spec.cluster_ip or "") if spec else "",
        selector=dict(spec.selector or {}) if spec else {},
        internal_endpoint=get_internal_endpoint(service),
        external_endpoints=get_external_endpoints(service),
    )


def create_service_list(
    services: Sequence[client.V1Service],
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    summaries = [to_service(service) for service in services]
    return to_aggregate_list(ResourceKind.SERVICE, summaries, query, metrics_client)


def get_service_list_from_channels(
    channels: ResourceChannels,
    query: DataSelectQuery = NO_DATA_SELECT,
    metrics_client: MetricsClient | None = None,
) -> AggregateList:
    results = read_channels(channels, {"service_list": PRIMARY})
    if results is None:
        return empty_aggregate_list(ResourceKind.SERVICE)
    return create_service_list(results["service_list"], query, metrics_client)


def _service_ports(service: client.V1Service) -> list[ServicePort]:
    ports = service.spec.ports if service.spec else None
    return [
        ServicePort(port=port.port, protocol=port.protocol or "TCP", node_port=port.node_port)
        for port in ports or []
    ]
