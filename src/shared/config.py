"""Shared configuration management using pydantic-settings."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from src.shared.constants import DEFAULT_ENVIRONMENT


class SharedConfig(BaseSettings):
    """Base configuration shared across all entry points."""
    log_level: str = Field(default="info", validation_alias="LOG_LEVEL")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }


class ServiceGraphConfig(SharedConfig):
    """Configuration for the Service Graph application and MCP server."""
    data_path: str = Field(
        default="./data/environments", validation_alias="DATA_PATH"
    )
    default_environment: str = Field(
        default=DEFAULT_ENVIRONMENT, validation_alias="DEFAULT_ENVIRONMENT"
    )
    state_lock_timeout: float = Field(
        default=-1.0, validation_alias="STATE_LOCK_TIMEOUT"
    )
