# This file defines liveness, readiness, and version endpoints for API operations.
# It exists so orchestration and monitoring systems can verify service health quickly.
# The readiness check confirms the record store answers and the access policy files load cleanly.
# Version details here help clients track API, schema, and policy compatibility over time.

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Request

from src.access_policy.decisions import PolicyConfigError
from src.api.dependencies import ConfigDep, EngineDep, StoreDep, get_policy_engine
from src.api.schema_versions import build_version_fields
from src.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    store: StoreDep,
) -> dict[str, object]:
    store_connected = store.can_connect()
    policy_version: str | None = None
    try:
        policy_version = get_policy_engine().policy_version
    except (OSError, PolicyConfigError) as exc:
        logger.error("Access policy failed to load: %s", exc)
    policy_loaded = policy_version is not None

    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "store_connected": store_connected,
        "policy_loaded": policy_loaded,
        "policy_version": policy_version,
        "ready": store_connected and policy_loaded,
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
    engine: EngineDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "policy_version": engine.policy_version,
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
