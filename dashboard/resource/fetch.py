"""Producer side of the aggregation: starts Kubernetes list calls and hands back channels."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol

from dashboard.resource.channels import ResourceChannel, ResourceChannels


class ResourceLister(Protocol):
    def list_replica_sets(self, namespace: str | None = None) -> list[Any]: ...

    def list_deployments(self, namespace: str | None = None) -> list[Any]: ...

    def list_daemon_sets(self, namespace: str | None = None) -> list[Any]: ...

    def list_stateful_sets(self, namespace: str | None = None) -> list[Any]: ...

    def list_jobs(self, namespace: str | None = None) -> list[Any]: ...

    def list_pods(self, namespace: str | None = None) -> list[Any]: ...

    def list_services(self, namespace: str | None = None) -> list[Any]: ...

    def list_events(self, namespace: str | None = None) -> list[Any]: ...

    def list_nodes(self) -> list[Any]: ...


@dataclass(frozen=True)
class NamespaceQuery:
    """Namespaces a request is scoped to. No namespaces means all of them."""

    namespaces: tuple[str, ...] = ()

    @classmethod
    def from_string(cls, value: str | None) -> NamespaceQuery:
        if not value:
            return cls()
        names = [item.strip() for item in value.split(",") if item.strip()]
        return cls(namespaces=tuple(dict.fromkeys(names)))

    def to_request_param(self) -> str | None:
        # Several namespaces are fetched cluster-wide and filtered afterwards.
        if len(self.namespaces) == 1:
            return self.namespaces[0]
        return None

    def matches(self, namespace: str | None) -> bool:
        return not self.namespaces or (namespace or "") in self.namespaces


ALL_NAMESPACES = NamespaceQuery()

# channel name -> lister method
CHANNEL_SOURCES: dict[str, str] = {
    "replica_set_list": "list_replica_sets",
    "deployment_list": "list_deployments",
    "daemon_set_list": "list_daemon_sets",
    "stateful_set_list": "list_stateful_sets",
    "job_list": "list_jobs",
    "pod_list": "list_pods",
    "service_list": "list_services",
    "event_list": "list_events",
}
CLUSTER_CHANNEL_SOURCES: dict[str, str] = {
    "node_list": "list_nodes",
}


class ChannelFactory:
    def __init__(self, lister: ResourceLister, max_workers: int) -> None:
        self._logger = logging.getLogger(__name__)
        self._lister = lister
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="resource-fetch"
        )

    def get_channel(
        self, name: str, namespace_query: NamespaceQuery = ALL_NAMESPACES
    ) -> ResourceChannel:
        if name in CLUSTER_CHANNEL_SOURCES:
            method = getattr(self._lister, CLUSTER_CHANNEL_SOURCES[name])
            return self._start(name, method, ALL_NAMESPACES)
        if name not in CHANNEL_SOURCES:
            raise KeyError(f"unknown resource channel: {name}")
        method = getattr(self._lister, CHANNEL_SOURCES[name])
        namespace = namespace_query.to_request_param()
        return self._start(name, lambda: method(namespace), namespace_query)

    def get_channels(
        self, names: Iterable[str], namespace_query: NamespaceQuery = ALL_NAMESPACES
    ) -> ResourceChannels:
        return ResourceChannels(
            **{name: self.get_channel(name, namespace_query) for name in names}
        )

    def shutdown(self) -> None:
        # Queued fetches still run so every handed-out channel gets its result.
        self._executor.shutdown(wait=False)

    def _start(
        self,
        name: str,
        fetch: Callable[[], list[Any]],
        namespace_query: NamespaceQuery,
    ) -> ResourceChannel:
        channel: ResourceChannel = ResourceChannel(name)

        def produce() -> None:
            try:
                items = [item for item in fetch() if namespace_query.matches(_namespace_of(item))]
            except Exception as exc:  # noqa: BLE001 - the consumer classifies the failure.
                self._logger.warning("Failed to fetch %s: %s", name, exc)
                channel.send_error(exc)
                return
            except BaseException as exc:
                channel.send_error(exc)
                raise
            channel.send_value(items)

        try:
            self._executor.submit(produce)
        except RuntimeError as exc:
            channel.send_error(exc)
        return channel


def _namespace_of(item: Any) -> str | None:
    metadata = getattr(item, "metadata", None)
    return metadata.namespace if metadata is not None else None
