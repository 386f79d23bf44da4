from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dashboard.models.metric import Metric


class ResourceKind(str, Enum):
    REPLICA_SET = "replicaset"
    DEPLOYMENT = "deployment"
    DAEMON_SET = "daemonset"
    STATEFUL_SET = "statefulset"
    JOB = "job"
    POD = "pod"
    NODE = "node"
    SERVICE = "service"
    EVENT = "event"


class PropertyName(str, Enum):
    NAME = "name"
    NAMESPACE = "namespace"
    CREATION_TIMESTAMP = "creationTimestamp"
    STATUS = "status"
    NODE_NAME = "nodeName"
    TYPE = "type"
    REASON = "reason"
    LAST_SEEN = "lastSeen"


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_jsonable(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class ResourceIdentity:
    kind: ResourceKind
    namespace: str
    name: str
    uid: str


@dataclass(frozen=True)
class ObjectMeta:
    name: str
    namespace: str = ""
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    creation_timestamp: datetime | None = None

    @classmethod
    def from_k8s(cls, metadata: Any) -> ObjectMeta:
        if metadata is None:
            return cls(name="")
        return cls(
            name=metadata.name or "",
            namespace=metadata.namespace or "",
            uid=metadata.uid or "",
            labels=dict(metadata.labels or {}),
            creation_timestamp=metadata.creation_timestamp,
        )


@dataclass(frozen=True)
class TypeMeta:
    kind: ResourceKind


@dataclass(frozen=True)
class ResourceSummary:
    object_meta: ObjectMeta
    type_meta: TypeMeta

    def identity(self) -> ResourceIdentity:
        return ResourceIdentity(
            kind=self.type_meta.kind,
            namespace=self.object_meta.namespace,
            name=self.object_meta.name,
            uid=self.object_meta.uid,
        )

    def get_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.NAME:
            return self.object_meta.name
        if name is PropertyName.NAMESPACE:
            return self.object_meta.namespace
        if name is PropertyName.CREATION_TIMESTAMP:
            return self.object_meta.creation_timestamp
        return self._extra_property(name)

    def _extra_property(self, name: PropertyName) -> object | None:
        return None

    def to_dict(self) -> dict[str, object]:
        return to_jsonable(self)


@dataclass(frozen=True)
class Event(ResourceSummary):
    reason: str = ""
    message: str = ""
    type: str = ""
    count: int = 0
    source_component: str = ""
    involved_object_kind: str = ""
    involved_object_name: str = ""
    first_seen: datetime | None = None
    last_seen: datetime | None = None

    def _extra_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.TYPE:
            return self.type
        if name is PropertyName.REASON:
            return self.reason
        if name is PropertyName.LAST_SEEN:
            return self.last_seen
        return None


@dataclass(frozen=True)
class PodInfo:
    current: int = 0
    desired: int = 0
    running: int = 0
    pending: int = 0
    failed: int = 0
    succeeded: int = 0
    warnings: list[Event] = field(default_factory=list)


@dataclass(frozen=True)
class Workload(ResourceSummary):
    """Summary shared by every pod controller kind."""

    pods: PodInfo = field(default_factory=PodInfo)
    container_images: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if self.pods.failed > 0:
            return "Failed"
        if self.pods.pending > 0 or self.pods.current < self.pods.desired:
            return "Pending"
        return "Running"

    def _extra_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.STATUS:
            return self.status
        return None


@dataclass(frozen=True)
class Pod(ResourceSummary):
    status: str = ""
    restart_count: int = 0
    node_name: str = ""
    warnings: list[Event] = field(default_factory=list)

    def _extra_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.STATUS:
            return self.status
        if name is PropertyName.NODE_NAME:
            return self.node_name
        return None


@dataclass(frozen=True)
class NodeAllocatedResources:
    cpu_requests: int = 0
    cpu_requests_fraction: float = 0.0
    cpu_limits: int = 0
    cpu_limits_fraction: float = 0.0
    cpu_capacity: int = 0
    memory_requests: int = 0
    memory_requests_fraction: float = 0.0
    memory_limits: int = 0
    memory_limits_fraction: float = 0.0
    memory_capacity: int = 0
    allocated_pods: int = 0
    pod_capacity: int = 0
    pod_fraction: float = 0.0


@dataclass(frozen=True)
class Node(ResourceSummary):
    ready: str = "Unknown"
    unschedulable: bool = False
    allocated_resources: NodeAllocatedResources = field(default_factory=NodeAllocatedResources)

    def _extra_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.STATUS:
            return self.ready
        return None


@dataclass(frozen=True)
class ServicePort:
    port: int
    protocol: str = "TCP"
    node_port: int | None = None


@dataclass(frozen=True)
class Endpoint:
    host: str
    ports: list[ServicePort] = field(default_factory=list)


@dataclass(frozen=True)
class Service(ResourceSummary):
    type: str = "ClusterIP"
    cluster_ip: str = ""
    selector: dict[str, str] = field(default_factory=dict)
    internal_endpoint: Endpoint | None = None
    external_endpoints: list[Endpoint] = field(default_factory=list)

    def _extra_property(self, name: PropertyName) -> object | None:
        if name is PropertyName.TYPE:
            return self.type
        return None


@dataclass(frozen=True)
class ListMeta:
    total_items: int = 0


@dataclass(frozen=True)
class AggregateList:
    kind: ResourceKind
    list_meta: ListMeta = field(default_factory=ListMeta)
    cumulative_metrics: list[Metric] = field(default_factory=list)
    items: list[ResourceSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return to_jsonable(self)
