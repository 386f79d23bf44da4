from __future__ import annotations

from collections.abc import Callable

import pytest

from dashboard.resource.channels import ResourceChannels
from tests.factories import filled_channel


@pytest.fixture
def channels_factory() -> Callable[..., ResourceChannels]:
    """Build a channel bundle with every listed kind already written.

    Keyword arguments map a channel name to a list or an exception.
    """

    def build(**results: list[object] | BaseException) -> ResourceChannels:
        channels = {}
        for name, result in results.items():
            if isinstance(result, BaseException):
                channels[name] = filled_channel(name, error=result)
            else:
                channels[name] = filled_channel(name, value=result)
        return ResourceChannels(**channels)

    return build
