# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the policy engine and record store are created once and shared through dependency injection.
# The setup keeps routers thin and makes endpoint tests easy to override.
# Services are assembled per request from the shared engine and store, which are both read-mostly.

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from src.access_policy.engine import AccessPolicyEngine
from src.access_policy.policy_loader import load_access_policy_engine
from src.access_policy.records import Principal
from src.api.api_config import ApiConfig, get_api_config
from src.api.principal import resolve_principal
from src.api.record_store import InMemoryRecordStore, RecordStore
from src.api.services.service_view_service import ServiceViewService
from src.api.services.user_service import UserService


@lru_cache(maxsize=1)
def get_policy_engine() -> AccessPolicyEngine:
    return load_access_policy_engine()


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    config = get_api_config()
    if config.seed_path:
        return InMemoryRecordStore.from_seed_file(config.seed_path, tier_parser=get_policy_engine().resolve_tier)
    return InMemoryRecordStore()


def get_config() -> ApiConfig:
    return get_api_config()


ConfigDep = Annotated[ApiConfig, Depends(get_config)]
EngineDep = Annotated[AccessPolicyEngine, Depends(get_policy_engine)]
StoreDep = Annotated[RecordStore, Depends(get_record_store)]


def get_current_principal(
    request: Request,
    config: ConfigDep,
    engine: EngineDep,
    store: StoreDep,
) -> Principal | None:
    return resolve_principal(request=request, config=config, engine=engine, store=store)


def get_user_service(engine: EngineDep, store: StoreDep) -> UserService:
    return UserService(engine=engine, store=store)


def get_service_view_service(engine: EngineDep, store: StoreDep) -> ServiceViewService:
    return ServiceViewService(engine=engine, store=store)
