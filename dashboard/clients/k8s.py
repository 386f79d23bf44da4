from __future__ import annotations

import logging
from typing import Any

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException


class KubernetesNotConfiguredError(RuntimeError):
    pass


# resource -> (api attribute, namespaced list method, cluster-wide list method)
_LIST_METHODS: dict[str, tuple[str, str | None, str]] = {
    "replica_sets": (
        "_apps_api",
        "list_namespaced_replica_set",
        "list_replica_set_for_all_namespaces",
    ),
    "deployments": (
        "_apps_api",
        "list_namespaced_deployment",
        "list_deployment_for_all_namespaces",
    ),
    "daemon_sets": (
        "_apps_api",
        "list_namespaced_daemon_set",
        "list_daemon_set_for_all_namespaces",
    ),
    "stateful_sets": (
        "_apps_api",
        "list_namespaced_stateful_set",
        "list_stateful_set_for_all_namespaces",
    ),
    "jobs": (
        "_batch_api",
        "list_namespaced_job",
        "list_job_for_all_namespaces",
    ),
    "pods": (
        "_core_api",
        "list_namespaced_pod",
        "list_pod_for_all_namespaces",
    ),
    "services": (
        "_core_api",
        "list_namespaced_service",
        "list_service_for_all_namespaces",
    ),
    "events": (
        "_core_api",
        "list_namespaced_event",
        "list_event_for_all_namespaces",
    ),
    "nodes": (
        "_core_api",
        None,
        "list_node",
    ),
}


class KubernetesClient:
    def __init__(self, timeout_seconds: int) -> None:
        self._logger = logging.getLogger(__name__)
        self._timeout_seconds = timeout_seconds
        self._core_api = self._build_client()
        self._apps_api = client.AppsV1Api() if self._core_api else None
        self._batch_api = client.BatchV1Api() if self._core_api else None
        self._custom_api = client.CustomObjectsApi() if self._core_api else None

    @property
    def custom_api(self) -> client.CustomObjectsApi | None:
        return self._custom_api

    def list_replica_sets(self, namespace: str | None = None) -> list[client.V1ReplicaSet]:
        return self._list("replica_sets", namespace)

    def list_deployments(self, namespace: str | None = None) -> list[client.V1Deployment]:
        return self._list("deployments", namespace)

    def list_daemon_sets(self, namespace: str | None = None) -> list[client.V1DaemonSet]:
        return self._list("daemon_sets", namespace)

    def list_stateful_sets(self, namespace: str | None = None) -> list[client.V1StatefulSet]:
        return self._list("stateful_sets", namespace)

    def list_jobs(self, namespace: str | None = None) -> list[client.V1Job]:
        return self._list("jobs", namespace)

    def list_pods(self, namespace: str | None = None) -> list[client.V1Pod]:
        return self._list("pods", namespace)

    def list_services(self, namespace: str | None = None) -> list[client.V1Service]:
        return self._list("services", namespace)

    def list_events(self, namespace: str | None = None) -> list[client.CoreV1Event]:
        return self._list("events", namespace)

    def list_nodes(self) -> list[client.V1Node]:
        return self._list("nodes", None)

    def _list(self, resource: str, namespace: str | None) -> list[Any]:
        api_attr, namespaced_method, cluster_method = _LIST_METHODS[resource]
        api = getattr(self, api_attr)
        if api is None:
            raise KubernetesNotConfiguredError("kubernetes client is not configured")
        if namespace and namespaced_method:
            response = getattr(api, namespaced_method)(
                namespace=namespace,
                _request_timeout=self._timeout_seconds,
            )
        else:
            response = getattr(api, cluster_method)(_request_timeout=self._timeout_seconds)
        items = list(response.items or [])
        self._logger.debug(
            "Listed %d %s in %s", len(items), resource, namespace or "all namespaces"
        )
        return items

    def _build_client(self) -> client.CoreV1Api | None:
        try:
            config.load_incluster_config()
            self._logger.info("Loaded in-cluster Kubernetes config")
        except ConfigException:
            try:
                config.load_kube_config()
                self._logger.info("Loaded kubeconfig for local development")
            except ConfigException as exc:
                self._logger.warning("Failed to configure Kubernetes client: %s", exc)
                return None
        return client.CoreV1Api()
