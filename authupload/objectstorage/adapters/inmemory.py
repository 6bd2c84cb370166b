from __future__ import annotations
import threading
import time
from typing import Dict, List, Optional
from urllib.parse import quote

from ..contracts import DEFAULT_PRESIGN_EXPIRES, PresignOptions, PutObjectResult, StoredObject
from ..errors import ObjectNotFound
from ..ports import ObjectStorePort


class InMemoryObjectStore(ObjectStorePort):
    """
    Process-local bucket for tests and local development.
    Presigned URLs carry an expiry but are not signed.
    """

    def __init__(self, bucket: str = "local", public_base_url: Optional[str] = None):
        self.bucket = bucket
        self.public_base_url = (public_base_url or f"memory://{bucket}").rstrip("/")
        self._lock = threading.RLock()
        self._objects: Dict[str, StoredObject] = {}

    async def put(self, key: str, body: bytes, mime_type: str,
                  metadata: Optional[Dict[str, str]] = None) -> PutObjectResult:
        with self._lock:
            self._objects[key] = StoredObject(body=bytes(body), content_type=mime_type, metadata=dict(metadata or {}))
        return PutObjectResult(key=key, url=self.public_url(key), size=len(body), mime_type=mime_type)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._objects.pop(key, None)

    async def get(self, key: str) -> bytes:
        with self._lock:
            obj = self._objects.get(key)
        if obj is None:
            raise ObjectNotFound(f"object not found: {key}")
        return obj.body

    async def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._objects

    async def list(self, prefix: Optional[str] = None, max_keys: int = 1000) -> List[str]:
        with self._lock:
            keys = [k for k in self._objects if not prefix or k.startswith(prefix)]
        return keys[:max_keys]

    def _signed(self, key: str, op: str, expires_in: int) -> str:
        expires_at = int(time.time()) + int(expires_in)
        return f"{self.public_base_url}/{quote(key)}?op={op}&expires={expires_at}"

    async def presigned_upload_url(self, key: str, options: Optional[PresignOptions] = None) -> str:
        opts = options or PresignOptions()
        return self._signed(key, "put", opts.expires_in)

    async def presigned_download_url(self, key: str, expires_in: int = DEFAULT_PRESIGN_EXPIRES) -> str:
        return self._signed(key, "get", expires_in)

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"
