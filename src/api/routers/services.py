# This file defines service record endpoints under the versioned API path.
# It exists so clients read transactions only through the requester-specific projection.
# The router enforces deterministic pagination and allowlisted sorting for repeatable results.
# Gate checks and projection live in the service layer.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.access_policy.records import Principal
from src.api.dependencies import ConfigDep, get_current_principal, get_service_view_service
from src.api.error_handlers import APIError
from src.api.pagination import parse_list_query
from src.api.record_store import SERVICE_SORT_FIELDS
from src.api.response_envelope import build_list_envelope, build_object_envelope
from src.api.schemas.common import PaginationMetadata
from src.api.schemas.service_schemas import ProfileServicesResponseV1, ServiceViewListResponseV1
from src.api.services.service_view_service import ServiceViewService

router = APIRouter(prefix="/services", tags=["services"])
ServiceViewServiceDep = Annotated[ServiceViewService, Depends(get_service_view_service)]
PrincipalDep = Annotated[Principal | None, Depends(get_current_principal)]


@router.get("/all", response_model=ServiceViewListResponseV1)
def services_all(
    request: Request,
    service: ServiceViewServiceDep,
    config: ConfigDep,
    principal: PrincipalDep,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort: str | None = Query(default=None),
) -> dict[str, object]:
    try:
        query = parse_list_query(
            page=page,
            page_size=page_size,
            limit=limit,
            sort=sort,
            default_page_size=config.default_page_size,
            max_page_size=config.max_page_size,
            default_sort=config.default_sort_order,
            allowed_fields=SERVICE_SORT_FIELDS,
        )
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_QUERY_PARAM",
            message=str(exc),
        ) from exc

    service_result = service.list_all(principal=principal, query=query)
    pagination = PaginationMetadata(**query.metadata(total_count=int(service_result["total_count"])))

    return build_list_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=list(service_result["rows"]),
        pagination=pagination.model_dump(),
    )


@router.get("/{profile_id}", response_model=ProfileServicesResponseV1)
def services_for_profile(
    request: Request,
    service: ServiceViewServiceDep,
    config: ConfigDep,
    principal: PrincipalDep,
    profile_id: str,
) -> dict[str, object]:
    rows = service.for_profile(principal=principal, profile_id=profile_id)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=rows,
        length=len(rows),
    )
