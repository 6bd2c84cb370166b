from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .contracts import DEFAULT_PRESIGN_EXPIRES, PresignOptions, PutObjectResult


class ObjectStorePort(ABC):
    """
    Remote bucket access. Transport/storage failures propagate unchanged;
    nothing here retries.
    """

    @abstractmethod
    async def put(self, key: str, body: bytes, mime_type: str,
                  metadata: Optional[Dict[str, str]] = None) -> PutObjectResult: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Raises ObjectNotFound when the key is absent."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """False only for a confirmed miss; other failures raise."""

    @abstractmethod
    async def list(self, prefix: Optional[str] = None, max_keys: int = 1000) -> List[str]: ...

    @abstractmethod
    async def presigned_upload_url(self, key: str, options: Optional[PresignOptions] = None) -> str: ...

    @abstractmethod
    async def presigned_download_url(self, key: str, expires_in: int = DEFAULT_PRESIGN_EXPIRES) -> str: ...

    @abstractmethod
    def public_url(self, key: str) -> str: ...
