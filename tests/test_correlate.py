from __future__ import annotations

import pytest
from kubernetes import client

from dashboard.resource.correlate import (
    OwnerKey,
    correlate,
    events_for_objects,
    pods_by_node,
)
from tests.factories import make_event, make_pod, make_replica_set, owner_reference

RS_KEY = OwnerKey("default", "rs", "rs-uid")


def _owned_pod(
    pod_name: str = "pod",
    *,
    owner_name: str = "rs",
    owner_uid: str = "rs-uid",
    controller: bool | None = True,
    namespace: str = "default",
) -> client.V1Pod:
    reference = owner_reference(owner_name, owner_uid, controller=controller)
    return make_pod(pod_name, namespace=namespace, owners=[reference])


def test_pod_matching_every_field_is_owned() -> None:
    owner = make_replica_set("rs", uid="rs-uid")
    pod = _owned_pod()

    assert correlate([owner], [pod])[RS_KEY] == [pod]


@pytest.mark.parametrize(
    "overrides",
    [
        {"owner_name": "other-rs"},
        {"owner_uid": "other-uid"},
        {"controller": False},
        {"controller": None},
        {"namespace": "other"},
    ],
)
def test_changing_one_reference_field_removes_the_match(overrides: dict[str, object]) -> None:
    owner = make_replica_set("rs", uid="rs-uid")

    assert correlate([owner], [_owned_pod(**overrides)])[RS_KEY] == []


def test_correlate_gives_every_owner_a_bucket() -> None:
    owners = [make_replica_set("rs", uid="rs-uid"), make_replica_set("idle", uid="idle-uid")]

    buckets = correlate(owners, [])

    assert len(buckets) == 2
    assert buckets[OwnerKey("default", "idle", "idle-uid")] == []
    assert buckets[OwnerKey("default", "rs", "rs-uid")] == []


def test_correlate_partitions_and_drops_orphans() -> None:
    owners = [make_replica_set("rs", uid="rs-uid"), make_replica_set("web", uid="web-uid")]
    first = _owned_pod("first")
    second = _owned_pod("second", owner_name="web", owner_uid="web-uid")
    orphan = make_pod("orphan")
    third = _owned_pod("third")

    buckets = correlate(owners, [first, orphan, second, third])

    assert buckets[OwnerKey("default", "rs", "rs-uid")] == [first, third]
    assert buckets[OwnerKey("default", "web", "web-uid")] == [second]


def test_correlate_keeps_only_exact_matches_in_input_order() -> None:
    owner = make_replica_set("rs", uid="rs-uid")
    pods = [
        _owned_pod("a"),
        _owned_pod("b", owner_uid="nope"),
        _owned_pod("c", namespace="kube-system"),
        _owned_pod("d"),
    ]

    owned = correlate([owner], pods)[RS_KEY]

    assert [pod.metadata.name for pod in owned] == ["a", "d"]


def test_events_for_objects_matches_uid_and_namespace() -> None:
    pod = make_pod("web")
    other = make_pod("db")
    event = make_event("web.1", pod)
    unrelated = make_event("db.1", other)

    assert events_for_objects([event, unrelated], [pod]) == [event]
    assert events_for_objects([event], []) == []


def test_pods_by_node_skips_unscheduled() -> None:
    scheduled = make_pod("a", node_name="node-1")
    unscheduled = make_pod("b")

    assert pods_by_node([scheduled, unscheduled]) == {"node-1": [scheduled]}
