from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from kubernetes import client

from dashboard.models.k8s import Event, ObjectMeta, PodInfo, ResourceKind, TypeMeta
from dashboard.resource.correlate import events_for_objects

POD_RUNNING = "Running"
POD_PENDING = "Pending"
POD_FAILED = "Failed"
POD_SUCCEEDED = "Succeeded"
POD_UNKNOWN = "Unknown"
POD_TERMINATING = "Terminating"

WARNING_EVENT_TYPE = "Warning"


def get_pod_info(
    current: int | None,
    desired: int | None,
    pods: Sequence[client.V1Pod],
    events: Sequence[client.CoreV1Event] = (),
) -> PodInfo:
    """Replica counts and pod phase tallies for one controller."""
    phases = [_pod_phase(pod) for pod in pods]
    return PodInfo(
        current=current or 0,
        desired=desired or 0,
        running=phases.count(POD_RUNNING),
        pending=phases.count(POD_PENDING),
        failed=phases.count(POD_FAILED),
        succeeded=phases.count(POD_SUCCEEDED),
        warnings=get_pods_event_warnings(events, pods),
    )


def get_pods_event_warnings(
    events: Sequence[client.CoreV1Event], pods: Sequence[client.V1Pod]
) -> list[Event]:
    warnings: list[Event] = []
    seen: set[tuple[str, ...]] = set()
    for event in events_for_objects(events, pods):
        if event.type != WARNING_EVENT_TYPE:
            continue
        identity = _event_identity(event)
        if identity in seen:
            continue
        seen.add(identity)
        warnings.append(to_event(event))
    return warnings


def get_pod_status(pod: client.V1Pod) -> str:
    if pod.metadata is not None and pod.metadata.deletion_timestamp is not None:
        return POD_TERMINATING
    phase = _pod_phase(pod)
    if phase in (POD_RUNNING, POD_PENDING, POD_FAILED, POD_SUCCEEDED):
        return phase
    return POD_UNKNOWN


def get_restart_count(pod: client.V1Pod) -> int:
    statuses = pod.status.container_statuses if pod.status else None
    return sum(status.restart_count or 0 for status in statuses or [])


def get_container_images(template: client.V1PodTemplateSpec | None) -> list[str]:
    if template is None or template.spec is None:
        return []
    return [container.image for container in template.spec.containers or [] if container.image]


def to_event(event: client.CoreV1Event) -> Event:
    source = event.source
    involved = event.involved_object
    return Event(
        object_meta=ObjectMeta.from_k8s(event.metadata),
        type_meta=TypeMeta(kind=ResourceKind.EVENT),
        reason=event.reason or "",
        message=event.message or "",
        type=event.type or "",
        count=event.count or 0,
        source_component=(source.component or "") if source else "",
        involved_object_kind=(involved.kind or "") if involved else "",
        involved_object_name=(involved.name or "") if involved else "",
        first_seen=event.first_timestamp or event.event_time,
        last_seen=event.last_timestamp or event.event_time or event.first_timestamp,
    )


def _pod_phase(pod: client.V1Pod) -> str:
    return (pod.status.phase if pod.status else None) or POD_UNKNOWN


def _event_identity(event: Any) -> tuple[str, ...]:
    metadata = event.metadata
    if metadata is not None and metadata.uid:
        return ("uid", metadata.uid)
    if metadata is not None:
        return ("name", metadata.namespace or "", metadata.name or "")
    return ("object", str(id(event)))
