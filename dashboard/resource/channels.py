"""Single-use result channels that carry one fetch outcome from a producer to an aggregator."""

from __future__ import annotations

import json
import queue
from dataclasses import dataclass, fields
from enum import Enum
from typing import Generic, TypeVar

from kubernetes.client.exceptions import ApiException

T = TypeVar("T")


class OutcomeKind(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchOutcome(Generic[T]):
    kind: OutcomeKind
    value: T | None = None
    error: BaseException | None = None

    @classmethod
    def ok(cls, value: T) -> FetchOutcome[T]:
        return cls(kind=OutcomeKind.OK, value=value)

    @classmethod
    def not_found(cls, error: BaseException) -> FetchOutcome[T]:
        return cls(kind=OutcomeKind.NOT_FOUND, error=error)

    @classmethod
    def failed(cls, error: BaseException) -> FetchOutcome[T]:
        return cls(kind=OutcomeKind.FAILED, error=error)

    @classmethod
    def from_error(cls, error: BaseException) -> FetchOutcome[T]:
        if is_not_found(error):
            return cls.not_found(error)
        return cls.failed(error)


def is_not_found(error: BaseException) -> bool:
    """Return True for API errors whose status is 404 or whose status reason is NotFound."""
    if not isinstance(error, ApiException):
        return False
    if error.status == 404:
        return True
    return _status_reason(error) == "NotFound"


def _status_reason(error: ApiException) -> str | None:
    body = error.body
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if not isinstance(body, str) or not body:
        return None
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return None
    if isinstance(payload, dict):
        reason = payload.get("reason")
        return reason if isinstance(reason, str) else None
    return None


class ChannelConsumedError(RuntimeError):
    pass


class ResourceChannel(Generic[T]):
    """One-shot channel of capacity one.

    The producer writes exactly one outcome carrying a list of raw objects; the
    consumer reads it at most once.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._queue: queue.Queue[FetchOutcome[T]] = queue.Queue(maxsize=1)
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def send(self, outcome: FetchOutcome[T]) -> None:
        try:
            self._queue.put_nowait(outcome)
        except queue.Full as exc:
            raise RuntimeError(f"channel {self.name} already holds a result") from exc

    def send_value(self, value: T) -> None:
        self.send(FetchOutcome.ok(value))

    def send_error(self, error: BaseException) -> None:
        self.send(FetchOutcome.from_error(error))

    def receive(self) -> FetchOutcome[T]:
        if self._consumed:
            raise ChannelConsumedError(f"channel {self.name} was already read")
        self._consumed = True
        return self._queue.get()

    def __repr__(self) -> str:
        return f"ResourceChannel(name={self.name!r}, consumed={self._consumed})"


@dataclass
class ResourceChannels:
    """Channels for one aggregation call. Unused kinds stay None."""

    replica_set_list: ResourceChannel | None = None
    deployment_list: ResourceChannel | None = None
    daemon_set_list: ResourceChannel | None = None
    stateful_set_list: ResourceChannel | None = None
    job_list: ResourceChannel | None = None
    pod_list: ResourceChannel | None = None
    node_list: ResourceChannel | None = None
    service_list: ResourceChannel | None = None
    event_list: ResourceChannel | None = None

    def get(self, name: str) -> ResourceChannel:
        channel = getattr(self, name, None)
        if channel is None:
            raise KeyError(f"channel {name} is not part of this request")
        return channel

    def pending(self) -> list[ResourceChannel]:
        channels = []
        for item in fields(self):
            channel = getattr(self, item.name)
            if channel is not None and not channel.consumed:
                channels.append(channel)
        return channels

    def drain(self) -> None:
        """Consume every unread channel so no producer result is left behind."""
        for channel in self.pending():
            channel.receive()
