"""Collector settings loaded from ``TELEMETRY_*`` environment variables."""

import uuid
from functools import lru_cache
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the listener and the status server."""

    model_config = SettingsConfigDict(env_prefix="TELEMETRY_", env_file=".env", extra="ignore")

    udp_host: str = "0.0.0.0"
    udp_port: int = Field(5890, ge=0, le=65535)
    http_host: str = "127.0.0.1"
    http_port: int = Field(8787, ge=0, le=65535)
    history_capacity: int = Field(10, ge=1)
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
    events_poll_interval: float = Field(0.5, gt=0)
    # identity -> display name, registered at startup
    seed_clients: Dict[uuid.UUID, str] = {}


@lru_cache
def get_settings() -> Settings:
    return Settings()
