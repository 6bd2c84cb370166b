from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, constr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Domain ----------

class UploadedFile(BaseModel):
    filename: str
    mime_type: str
    data: bytes


class UploadOptions(BaseModel):
    folder: str = "uploads"
    uploaded_by: Optional[str] = None
    metadata: Optional[Dict[str, str]] = None


class NewFileRecord(BaseModel):
    filename: str
    original_name: str
    mime_type: str
    size: int
    key: str
    url: str
    uploaded_by: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class FileRecord(CamelModel):
    id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    key: str
    url: str
    uploaded_by: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class PaginatedFiles(CamelModel):
    files: List[FileRecord]
    total: int
    pages: int


# ---------- Requests / Responses ----------

class PresignedUploadRequest(CamelModel):
    filename: constr(strip_whitespace=True, min_length=1)
    mime_type: constr(strip_whitespace=True, min_length=1)
    folder: Optional[str] = None


class PresignedUploadResponse(CamelModel):
    url: str
    key: str
    expires_in: int


class ConfirmUploadRequest(CamelModel):
    key: constr(strip_whitespace=True, min_length=1)
    original_name: constr(min_length=1)
    mime_type: constr(min_length=1)
    size: int = Field(..., ge=0)
    uploaded_by: Optional[str] = None


# ---------- Ports ----------

class FileRepoPort(Protocol):
    """File metadata persistence. ``list`` is ordered by created_at, newest first."""
    def create(self, data: NewFileRecord) -> FileRecord: ...
    def get_by_id(self, file_id: str) -> Optional[FileRecord]: ...
    def get_by_key(self, key: str) -> Optional[FileRecord]: ...
    def list(self, *, offset: int, limit: int, uploaded_by: Optional[str] = None) -> List[FileRecord]: ...
    def count(self, *, uploaded_by: Optional[str] = None) -> int: ...
    def delete(self, file_id: str) -> None: ...
