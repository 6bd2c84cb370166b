from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HealthSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    HEALTH_MEMORY_RSS_MAX_BYTES: int = Field(default=512 * 1024 * 1024)
    HEALTH_DISK_PATH: str = Field(default="/")
    HEALTH_DISK_THRESHOLD: float = Field(default=0.9, gt=0, le=1)
