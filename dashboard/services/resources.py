from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from dashboard.models.k8s import AggregateList, ResourceKind
from dashboard.resource.channels import ResourceChannels
from dashboard.resource.dataselect import NO_DATA_SELECT, DataSelectQuery
from dashboard.resource.event import get_event_list_from_channels
from dashboard.resource.fetch import ALL_NAMESPACES, ChannelFactory, NamespaceQuery
from dashboard.resource.metric import MetricsClient
from dashboard.resource.node import get_node_list_from_channels
from dashboard.resource.pod import get_pod_list_from_channels
from dashboard.resource.service import get_service_list_from_channels
from dashboard.resource.workload import (
    get_daemon_set_list_from_channels,
    get_deployment_list_from_channels,
    get_job_list_from_channels,
    get_replica_set_list_from_channels,
    get_stateful_set_list_from_channels,
)

ListBuilder = Callable[[ResourceChannels, DataSelectQuery, MetricsClient | None], AggregateList]


@dataclass(frozen=True)
class ListRoute:
    channels: tuple[str, ...]
    build: ListBuilder
    namespaced: bool = True


LIST_ROUTES: dict[ResourceKind, ListRoute] = {
    ResourceKind.REPLICA_SET: ListRoute(
        ("replica_set_list", "pod_list", "event_list"), get_replica_set_list_from_channels
    ),
    ResourceKind.DEPLOYMENT: ListRoute(
        ("deployment_list", "replica_set_list", "pod_list", "event_list"),
        get_deployment_list_from_channels,
    ),
    ResourceKind.DAEMON_SET: ListRoute(
        ("daemon_set_list", "pod_list", "event_list"), get_daemon_set_list_from_channels
    ),
    ResourceKind.STATEFUL_SET: ListRoute(
        ("stateful_set_list", "pod_list", "event_list"), get_stateful_set_list_from_channels
    ),
    ResourceKind.JOB: ListRoute(("job_list", "pod_list", "event_list"), get_job_list_from_channels),
    ResourceKind.POD: ListRoute(("pod_list", "event_list"), get_pod_list_from_channels),
    ResourceKind.SERVICE: ListRoute(("service_list",), get_service_list_from_channels),
    ResourceKind.EVENT: ListRoute(("event_list",), get_event_list_from_channels),
    ResourceKind.NODE: ListRoute(
        ("node_list", "pod_list"), get_node_list_from_channels, namespaced=False
    ),
}


class ResourceService:
    def __init__(
        self,
        channel_factory: ChannelFactory,
        metrics_client: MetricsClient | None = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._channel_factory = channel_factory
        self._metrics_client = metrics_client

    def list_resources(
        self,
        kind: ResourceKind,
        namespace_query: NamespaceQuery = ALL_NAMESPACES,
        query: DataSelectQuery = NO_DATA_SELECT,
    ) -> AggregateList:
        route = LIST_ROUTES[kind]
        if not route.namespaced:
            namespace_query = ALL_NAMESPACES
        self._logger.debug(
            "Listing %s in %s",
            kind.value,
            ",".join(namespace_query.namespaces) or "all namespaces",
        )
        channels = self._channel_factory.get_channels(route.channels, namespace_query)
        return route.build(channels, query, self._metrics_client)
