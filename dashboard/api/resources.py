from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from kubernetes.client.exceptions import ApiException

from dashboard.clients.k8s import KubernetesNotConfiguredError
from dashboard.core.config import Settings
from dashboard.core.dependencies import get_resource_service, get_settings
from dashboard.models.k8s import ResourceKind
from dashboard.resource.dataselect import DataSelectQuery
from dashboard.resource.fetch import NamespaceQuery
from dashboard.schemas.dataselect import DataSelectParams
from dashboard.schemas.resources import ResourceListResponse
from dashboard.services.resources import ResourceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

_PASSTHROUGH_STATUSES = {401, 403, 404}


def get_data_select_query(
    filter_by: str | None = Query(default=None, alias="filterBy"),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    items_per_page: int | None = Query(default=None, alias="itemsPerPage"),
    page: int = Query(default=1),
    metric_names: str | None = Query(default=None, alias="metricNames"),
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> DataSelectQuery:
    try:
        params = DataSelectParams(
            filter_by=filter_by,
            sort_by=sort_by,
            items_per_page=items_per_page,
            page=page,
            metric_names=metric_names,
        )
        return params.to_query(settings.default_items_per_page)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/{kind}", response_model=ResourceListResponse)
def list_resources(
    kind: ResourceKind,
    query: DataSelectQuery = Depends(get_data_select_query),  # noqa: B008
    service: ResourceService = Depends(get_resource_service),  # noqa: B008
) -> ResourceListResponse:
    return _build_response(service, kind, None, query)


@router.get("/{kind}/{namespace}", response_model=ResourceListResponse)
def list_namespaced_resources(
    kind: ResourceKind,
    namespace: str,
    query: DataSelectQuery = Depends(get_data_select_query),  # noqa: B008
    service: ResourceService = Depends(get_resource_service),  # noqa: B008
) -> ResourceListResponse:
    if kind is ResourceKind.NODE:
        raise HTTPException(status_code=404, detail="nodes are not namespaced")
    return _build_response(service, kind, namespace, query)


def _build_response(
    service: ResourceService,
    kind: ResourceKind,
    namespace: str | None,
    query: DataSelectQuery,
) -> ResourceListResponse:
    try:
        aggregate = service.list_resources(kind, NamespaceQuery.from_string(namespace), query)
    except ApiException as exc:
        logger.warning(
            "Cluster API error while listing %s: %s %s", kind.value, exc.status, exc.reason
        )
        status_code = exc.status if exc.status in _PASSTHROUGH_STATUSES else 502
        detail = exc.reason or "cluster API error"
        raise HTTPException(status_code=status_code, detail=detail) from exc
    except KubernetesNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to list %s", kind.value)
        raise HTTPException(status_code=502, detail=f"failed to list {kind.value}: {exc}") from exc
    return ResourceListResponse.from_aggregate(aggregate)
