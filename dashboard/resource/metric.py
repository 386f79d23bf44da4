from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from dashboard.models.k8s import ResourceIdentity
from dashboard.models.metric import DataPoint, Metric, MetricSample

logger = logging.getLogger(__name__)


class MetricsClient(Protocol):
    def get_metrics(self, identity: ResourceIdentity) -> list[MetricSample]:
        raise NotImplementedError


def collect_samples(
    metrics_client: MetricsClient | None, identity: ResourceIdentity
) -> list[MetricSample]:
    """Samples for one item; a failing collaborator yields no samples instead of an error."""
    if metrics_client is None:
        return []
    try:
        return list(metrics_client.get_metrics(identity))
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Failed to get metrics for %s %s/%s: %s",
            identity.kind.value,
            identity.namespace,
            identity.name,
            exc,
        )
        return []


def aggregate_samples(
    metric_names: Sequence[str], samples: Sequence[MetricSample]
) -> list[Metric]:
    """Sum samples per requested metric name, keeping the requested order.

    A name no item reported a sample for is left out instead of reading as zero.
    """
    requested = set(metric_names)
    totals: dict[str, float] = {}
    latest: dict[str, int] = {}
    for sample in samples:
        if sample.metric_name not in requested:
            continue
        totals[sample.metric_name] = totals.get(sample.metric_name, 0.0) + sample.value
        latest.setdefault(sample.metric_name, 0)
        if sample.timestamp is not None:
            latest[sample.metric_name] = max(
                latest[sample.metric_name], int(sample.timestamp.timestamp())
            )
    return [
        Metric(metric_name=name, data_points=[DataPoint(x=latest[name], y=totals[name])])
        for name in metric_names
        if name in totals
    ]
