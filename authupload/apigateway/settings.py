from __future__ import annotations
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "auth-upload-api"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    NODE_ENV: Literal["development", "production", "test"] = Field(default="development")
    PORT: int = Field(default=3000)
    API_PREFIX: str = Field(default="api")
    API_VERSION: str = Field(default="v1")
    CORS_ORIGINS: str = Field(default="*")
    LOG_LEVEL: str = Field(default="INFO")
    APP_VERSION: str = Field(default="0.1.0")

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV == "production"

    def route_prefix(self) -> str:
        parts = [p.strip("/") for p in (self.API_PREFIX, self.API_VERSION) if p and p.strip("/")]
        return "/" + "/".join(parts) if parts else ""

    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]
