from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from kubernetes import client

from dashboard.resource.channels import ResourceChannel


def owner_reference(
    name: str, uid: str, *, kind: str = "ReplicaSet", controller: bool | None = True
) -> client.V1OwnerReference:
    return client.V1OwnerReference(
        api_version="apps/v1", kind=kind, name=name, uid=uid, controller=controller
    )


def object_meta(
    name: str,
    namespace: str = "default",
    uid: str | None = None,
    *,
    owners: list[client.V1OwnerReference] | None = None,
    labels: dict[str, str] | None = None,
    created: datetime | None = None,
) -> client.V1ObjectMeta:
    return client.V1ObjectMeta(
        name=name,
        namespace=namespace,
        uid=uid if uid is not None else f"{name}-uid",
        labels=labels,
        creation_timestamp=created,
        owner_references=owners,
    )


def make_pod(
    name: str,
    *,
    namespace: str = "default",
    owners: list[client.V1OwnerReference] | None = None,
    phase: str = "Running",
    node_name: str | None = None,
    requests: dict[str, str] | None = None,
    limits: dict[str, str] | None = None,
    restarts: int = 0,
) -> client.V1Pod:
    container = client.V1Container(
        name="app",
        image="nginx:1.25",
        resources=client.V1ResourceRequirements(requests=requests, limits=limits),
    )
    return client.V1Pod(
        metadata=object_meta(name, namespace, owners=owners),
        spec=client.V1PodSpec(containers=[container], node_name=node_name),
        status=client.V1PodStatus(
            phase=phase,
            container_statuses=[
                client.V1ContainerStatus(
                    name="app",
                    image="nginx:1.25",
                    image_id="docker://nginx",
                    ready=phase == "Running",
                    restart_count=restarts,
                )
            ],
        ),
    )


def make_replica_set(
    name: str,
    *,
    namespace: str = "default",
    uid: str | None = None,
    desired: int | None = 1,
    current: int = 1,
    owners: list[client.V1OwnerReference] | None = None,
    created: datetime | None = None,
) -> client.V1ReplicaSet:
    return client.V1ReplicaSet(
        metadata=object_meta(name, namespace, uid, owners=owners, created=created),
        spec=client.V1ReplicaSetSpec(
            replicas=desired,
            selector=client.V1LabelSelector(match_labels={"app": name}),
            template=client.V1PodTemplateSpec(
                spec=client.V1PodSpec(
                    containers=[client.V1Container(name="app", image="nginx:1.25")]
                )
            ),
        ),
        status=client.V1ReplicaSetStatus(replicas=current),
    )


def make_event(
    name: str,
    involved: client.V1Pod,
    *,
    event_type: str = "Warning",
    reason: str = "BackOff",
    uid: str | None = None,
    last_seen: datetime | None = None,
) -> client.CoreV1Event:
    return client.CoreV1Event(
        metadata=object_meta(name, involved.metadata.namespace, uid),
        involved_object=client.V1ObjectReference(
            kind="Pod",
            name=involved.metadata.name,
            namespace=involved.metadata.namespace,
            uid=involved.metadata.uid,
        ),
        type=event_type,
        reason=reason,
        message=f"{reason} for {involved.metadata.name}",
        count=1,
        last_timestamp=last_seen,
    )


def ts(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def filled_channel(
    name: str, value: list[object] | None = None, error: BaseException | None = None
) -> ResourceChannel:
    channel: ResourceChannel = ResourceChannel(name)
    if error is not None:
        channel.send_error(error)
    else:
        channel.send_value(value or [])
    return channel


class FakeCustomObjectsApi:
    def __init__(self, pod: dict[str, Any] | None = None, node: dict[str, Any] | None = None):
        self._pod = pod or {}
        self._node = node or {}
        self.requests: list[dict[str, Any]] = []

    def get_namespaced_custom_object(self, **kwargs: Any) -> dict[str, Any]:
        self.requests.append(kwargs)
        return self._pod

    def get_cluster_custom_object(self, **kwargs: Any) -> dict[str, Any]:
        self.requests.append(kwargs)
        return self._node
