from __future__ import annotations

import logging
from contextlib import suppress
from datetime import datetime
from decimal import Decimal

from kubernetes import client
from kubernetes.utils import parse_quantity

from dashboard.models.k8s import ResourceIdentity, ResourceKind
from dashboard.models.metric import MetricSample

CPU_USAGE = "cpu"
MEMORY_USAGE = "memory"

_METRICS_GROUP = "metrics.k8s.io"
_METRICS_VERSION = "v1beta1"


class MetricsServerClient:
    """Reads current usage from the metrics.k8s.io API.

    Pod usage is the sum over its containers. Other kinds report nothing.
    """

    def __init__(self, custom_api: client.CustomObjectsApi, timeout_seconds: int) -> None:
        self._logger = logging.getLogger(__name__)
        self._custom_api = custom_api
        self._timeout_seconds = timeout_seconds

    def get_metrics(self, identity: ResourceIdentity) -> list[MetricSample]:
        if identity.kind is ResourceKind.POD:
            response = self._custom_api.get_namespaced_custom_object(
                group=_METRICS_GROUP,
                version=_METRICS_VERSION,
                namespace=identity.namespace,
                plural="pods",
                name=identity.name,
                _request_timeout=self._timeout_seconds,
            )
            usages = [container.get("usage") or {} for container in response.get("containers", [])]
        elif identity.kind is ResourceKind.NODE:
            response = self._custom_api.get_cluster_custom_object(
                group=_METRICS_GROUP,
                version=_METRICS_VERSION,
                plural="nodes",
                name=identity.name,
                _request_timeout=self._timeout_seconds,
            )
            usages = [response.get("usage") or {}]
        else:
            return []
        return _to_samples(usages, _parse_timestamp(response.get("timestamp")))


def _to_samples(usages: list[dict[str, str]], timestamp: datetime | None) -> list[MetricSample]:
    cpu = Decimal(0)
    memory = Decimal(0)
    for usage in usages:
        if "cpu" in usage:
            cpu += parse_quantity(usage["cpu"])
        if "memory" in usage:
            memory += parse_quantity(usage["memory"])
    return [
        # millicores
        MetricSample(metric_name=CPU_USAGE, value=float(cpu * 1000), timestamp=timestamp),
        # bytes
        MetricSample(metric_name=MEMORY_USAGE, value=float(memory), timestamp=timestamp),
    ]


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    with suppress(ValueError):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None
