from __future__ import annotations

from functools import lru_cache

from dashboard.clients.k8s import KubernetesClient
from dashboard.clients.metrics import MetricsServerClient
from dashboard.core.config import Settings, load_settings
from dashboard.resource.fetch import ChannelFactory
from dashboard.resource.metric import MetricsClient
from dashboard.services.resources import ResourceService


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_k8s_client() -> KubernetesClient:
    settings = get_settings()
    return KubernetesClient(timeout_seconds=settings.k8s_api_timeout_seconds)


@lru_cache
def get_channel_factory() -> ChannelFactory:
    settings = get_settings()
    return ChannelFactory(get_k8s_client(), max_workers=settings.fetch_max_workers)


@lru_cache
def get_metrics_client() -> MetricsClient | None:
    settings = get_settings()
    custom_api = get_k8s_client().custom_api
    if not settings.metrics_enabled or custom_api is None:
        return None
    return MetricsServerClient(custom_api, timeout_seconds=settings.k8s_api_timeout_seconds)


@lru_cache
def get_resource_service() -> ResourceService:
    return ResourceService(get_channel_factory(), get_metrics_client())
