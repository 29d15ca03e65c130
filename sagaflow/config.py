from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_EVENT_HISTORY_SIZE,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY_MS,
    DEFAULT_STEP_TIMEOUT_MS,
)


class RedisConfig(BaseModel):
    """Configuration for the Redis event bus."""

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    channel_prefix: str = "sagaflow"


class EventBusConfig(BaseModel):
    """Event bus configuration settings."""

    backend: Literal["none", "inmemory", "redis"] = "none"
    max_history: int = Field(default=DEFAULT_EVENT_HISTORY_SIZE, ge=1)
    redis: RedisConfig = Field(default_factory=RedisConfig)


class StepDefaults(BaseModel):
    """Fallbacks used when neither a step nor its retry policy sets a value."""

    timeout_ms: float = Field(default=DEFAULT_STEP_TIMEOUT_MS, gt=0)
    delay_ms: float = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    backoff_multiplier: float = Field(default=DEFAULT_BACKOFF_MULTIPLIER, gt=0)
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)


class EngineConfig(BaseModel):
    """Top-level configuration model."""

    defaults: StepDefaults = Field(default_factory=StepDefaults)
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    event_bus: EventBusConfig = Field(default_factory=EventBusConfig)
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> EngineConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to SAGAFLOW_CONFIG env
            variable or 'sagaflow.yaml' in the current directory.
    """

    config_path = path or os.getenv("SAGAFLOW_CONFIG", "sagaflow.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = EngineConfig(**data)
    else:
        config = EngineConfig()

    env_backend = os.getenv("SAGAFLOW_EVENT_BUS")
    if env_backend:
        config.event_bus.backend = env_backend.lower()
    env_log_level = os.getenv("SAGAFLOW_LOG_LEVEL")
    if env_log_level:
        config.log_level = env_log_level.upper()
    return config
