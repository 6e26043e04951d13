# This file defines user endpoints under the versioned API path.
# It exists so clients can read accounts and deactivate them under the tiered access policy.
# Self deletion and deletion of another account are separate routes with separate gates.
# All authorization happens in the service layer; the router only parses and shapes responses.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from src.access_policy.records import Principal
from src.api.dependencies import ConfigDep, get_current_principal, get_user_service
from src.api.error_handlers import APIError
from src.api.pagination import parse_list_query
from src.api.record_store import USER_SORT_FIELDS
from src.api.response_envelope import build_list_envelope, build_object_envelope
from src.api.schemas.common import PaginationMetadata
from src.api.schemas.user_schemas import UserListResponseV1, UserResponseV1
from src.api.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
PrincipalDep = Annotated[Principal | None, Depends(get_current_principal)]


@router.get("/me", response_model=UserResponseV1)
def users_me(
    request: Request,
    service: UserServiceDep,
    config: ConfigDep,
    principal: PrincipalDep,
) -> dict[str, object]:
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=service.get_me(principal=principal),
    )


@router.get("", response_model=UserListResponseV1)
def users_list(
    request: Request,
    service: UserServiceDep,
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
            allowed_fields=USER_SORT_FIELDS,
        )
    except ValueError as exc:
        raise APIError(
            status_code=400,
            error_code="INVALID_QUERY_PARAM",
            message=str(exc),
        ) from exc

    service_result = service.list_users(principal=principal, query=query)
    pagination = PaginationMetadata(**query.metadata(total_count=int(service_result["total_count"])))

    return build_list_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=list(service_result["rows"]),
        pagination=pagination.model_dump(),
    )


@router.get("/{user_id}", response_model=UserResponseV1)
def users_find(
    request: Request,
    service: UserServiceDep,
    config: ConfigDep,
    principal: PrincipalDep,
    user_id: str,
) -> dict[str, object]:
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=service.find_user(principal=principal, user_id=user_id),
    )


@router.delete("/me", status_code=204)
def users_delete_me(service: UserServiceDep, principal: PrincipalDep) -> Response:
    service.delete_self(principal=principal)
    return Response(status_code=204)


@router.delete("/{user_id}", status_code=204)
def users_delete(service: UserServiceDep, principal: PrincipalDep, user_id: str) -> Response:
    service.delete_user(principal=principal, user_id=user_id)
    return Response(status_code=204)
