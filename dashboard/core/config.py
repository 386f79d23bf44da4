from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

APP_NAME = "kube-dashboard-aggregator"


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if not value:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    port: int
    log_level: str
    k8s_api_timeout_seconds: int
    fetch_max_workers: int
    metrics_enabled: bool
    default_items_per_page: int


def load_settings() -> Settings:
    return Settings(
        port=_get_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "info"),
        k8s_api_timeout_seconds=_get_int_env("K8S_API_TIMEOUT_SECONDS", 10),
        fetch_max_workers=max(1, _get_int_env("FETCH_MAX_WORKERS", 8)),
        metrics_enabled=_get_bool_env("METRICS_ENABLED", True),
        default_items_per_page=_get_int_env("DEFAULT_ITEMS_PER_PAGE", 0),
    )
