from __future__ import annotations
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ALLOWED_MIME_TYPES = "image/jpeg,image/png,image/gif,image/webp,application/pdf"


class UploadSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    MAX_FILE_SIZE: int = Field(default=10 * 1024 * 1024)  # 10 MiB
    ALLOWED_MIME_TYPES: str = Field(default=DEFAULT_ALLOWED_MIME_TYPES)

    def allowed_mime_types(self) -> List[str]:
        return [m.strip() for m in self.ALLOWED_MIME_TYPES.split(",") if m.strip()]
