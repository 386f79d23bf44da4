from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from dashboard.resource.channels import (
    FetchOutcome,
    OutcomeKind,
    ResourceChannel,
    ResourceChannels,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadPolicy:
    """How a list builder treats a missing or failed listing on one channel."""

    name: str
    tolerate_not_found: bool
    tolerate_failure: bool
    stop_on_not_found: bool = False


# Every error propagates.
REQUIRED = ReadPolicy("required", tolerate_not_found=False, tolerate_failure=False)
# The kind a builder lists. Not-found means an empty list and nothing else is read;
# failures propagate.
PRIMARY = ReadPolicy(
    "primary", tolerate_not_found=True, tolerate_failure=False, stop_on_not_found=True
)
# Enrichment only: not-found and failures both read as empty.
BEST_EFFORT = ReadPolicy("best_effort", tolerate_not_found=True, tolerate_failure=True)


def read_channel(channel: ResourceChannel, policy: ReadPolicy = REQUIRED) -> list[Any]:
    return _resolve(channel.name, channel.receive(), policy)


def read_channels(
    channels: ResourceChannels, policies: dict[str, ReadPolicy]
) -> dict[str, list[Any]] | None:
    """Read the named channels in order.

    Returns None when a channel whose policy stops on not-found reports not found.
    Either that or a hard failure drains every channel not read yet.
    """
    results: dict[str, list[Any]] = {}
    try:
        for name, policy in policies.items():
            channel = channels.get(name)
            outcome = channel.receive()
            if outcome.kind is OutcomeKind.NOT_FOUND and policy.stop_on_not_found:
                logger.debug("Channel %s returned not found, skipping the rest", name)
                channels.drain()
                return None
            results[name] = _resolve(name, outcome, policy)
    except Exception:
        channels.drain()
        raise
    return results


def _resolve(name: str, outcome: FetchOutcome, policy: ReadPolicy) -> list[Any]:
    if outcome.kind is OutcomeKind.OK:
        return list(outcome.value or [])
    if outcome.kind is OutcomeKind.NOT_FOUND and policy.tolerate_not_found:
        logger.debug("Channel %s returned not found, using empty list", name)
        return []
    if outcome.kind is OutcomeKind.FAILED and policy.tolerate_failure:
        logger.warning("Ignoring failed %s listing: %s", name, outcome.error)
        return []
    raise outcome.error
