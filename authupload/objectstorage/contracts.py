from __future__ import annotations
from typing import Dict, Optional

from pydantic import BaseModel, Field, conint

DEFAULT_PRESIGN_EXPIRES = 3600


class PutObjectResult(BaseModel):
    key: str
    url: str
    size: int
    mime_type: str


class PresignOptions(BaseModel):
    expires_in: conint(gt=0, le=7 * 24 * 3600) = DEFAULT_PRESIGN_EXPIRES
    content_type: Optional[str] = None


class StoredObject(BaseModel):
    """In-memory adapter's view of an object."""
    body: bytes
    content_type: str
    metadata: Dict[str, str] = Field(default_factory=dict)
