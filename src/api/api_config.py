# This file defines runtime settings for the API layer in one place.
# It exists so endpoint behavior, versioning, pagination, and principal headers can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates version paths and header names before the app starts serving requests.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEADER_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Marketplace Access API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    environment: str = "local"
    default_page_size: int = 50
    max_page_size: int = 200
    default_sort_order: str = "created_at:desc"
    allowed_origins: list[str] = Field(default_factory=list)
    principal_id_header: str = "x-principal-id"
    principal_tier_header: str = "x-principal-tier"
    seed_path: str | None = None
    app_version: str = "0.1.0"

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_version_path must start with '/'.")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2 or parts[-1].startswith("v") is False:
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator("principal_id_header", "principal_tier_header")
    @classmethod
    def validate_header_name(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not _HEADER_RE.match(normalized):
            raise ValueError(f"Invalid header name: {value!r}")
        return normalized

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Marketplace Access API"),
        "api_version_path": os.getenv("API_VERSION_PATH", "/api/v1"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "environment": os.getenv("ENV", "local"),
        "default_page_size": _env_int("API_DEFAULT_PAGE_SIZE", 50),
        "max_page_size": _env_int("API_MAX_PAGE_SIZE", 200),
        "default_sort_order": os.getenv("API_DEFAULT_SORT_ORDER", "created_at:desc"),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "principal_id_header": os.getenv("API_PRINCIPAL_ID_HEADER", "x-principal-id"),
        "principal_tier_header": os.getenv("API_PRINCIPAL_TIER_HEADER", "x-principal-tier"),
        "seed_path": os.getenv("API_SEED_PATH") or None,
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }
    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
