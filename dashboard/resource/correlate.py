"""Match dependent objects to their controlling owner through ownership references."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from kubernetes import client

D = TypeVar("D")


@dataclass(frozen=True)
class OwnerKey:
    namespace: str
    name: str
    uid: str


def owner_key(obj: Any) -> OwnerKey:
    metadata = obj.metadata
    if metadata is None:
        return OwnerKey(namespace="", name="", uid="")
    return OwnerKey(
        namespace=metadata.namespace or "",
        name=metadata.name or "",
        uid=metadata.uid or "",
    )


def controller_keys(dependent: Any) -> list[OwnerKey]:
    """Owner keys of every controller reference on the dependent, in the dependent's namespace."""
    metadata = dependent.metadata
    if metadata is None:
        return []
    namespace = metadata.namespace or ""
    references: Iterable[client.V1OwnerReference] = metadata.owner_references or []
    return [
        OwnerKey(namespace=namespace, name=reference.name or "", uid=reference.uid or "")
        for reference in references
        if reference.controller is True
    ]


def correlate(owners: Sequence[Any], dependents: Sequence[D]) -> dict[OwnerKey, list[D]]:
    """Partition dependents by controlling owner.

    Every owner gets a bucket, empty when nothing matches. Dependents that match
    no owner are left out. Bucket order follows the dependents' input order.
    """
    buckets: dict[OwnerKey, list[D]] = {owner_key(owner): [] for owner in owners}
    for dependent in dependents:
        seen: set[OwnerKey] = set()
        for key in controller_keys(dependent):
            if key in buckets and key not in seen:
                buckets[key].append(dependent)
                seen.add(key)
    return buckets


def events_for_objects(
    events: Sequence[client.CoreV1Event], objects: Sequence[Any]
) -> list[client.CoreV1Event]:
    """Events whose involved object is one of the given objects, matched by uid and namespace."""
    wanted = {
        (key.namespace, key.uid) for key in (owner_key(obj) for obj in objects) if key.uid
    }
    if not wanted:
        return []
    matched = []
    for event in events:
        involved = event.involved_object
        if involved is None or not involved.uid:
            continue
        namespace = involved.namespace or (event.metadata.namespace if event.metadata else "")
        if (namespace or "", involved.uid) in wanted:
            matched.append(event)
    return matched


def pods_by_node(pods: Sequence[client.V1Pod]) -> dict[str, list[client.V1Pod]]:
    nodes: dict[str, list[client.V1Pod]] = defaultdict(list)
    for pod in pods:
        node_name = pod.spec.node_name if pod.spec else None
        if node_name:
            nodes[node_name].append(pod)
    return dict(nodes)
