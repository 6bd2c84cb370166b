from __future__ import annotations
import logging
import time
from contextlib import contextmanager
from typing import Dict, List, Optional

from opentelemetry import trace

from .contracts import DEFAULT_PRESIGN_EXPIRES, PresignOptions, PutObjectResult
from .ports import ObjectStorePort

log = logging.getLogger("authupload.objectstorage")
tracer = trace.get_tracer("authupload.objectstorage")


@contextmanager
def _span(name: str, **attrs):
    with tracer.start_as_current_span(name) as span:
        for k, v in attrs.items():
            if v is not None:
                span.set_attribute(f"objectstore.{k}", v)
        yield span


def _ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


class ObjectStoreClient(ObjectStorePort):
    """
    Logging/tracing façade over an adapter. Errors are logged and re-raised
    untouched so callers see the adapter's own exception types.
    """

    def __init__(self, adapter: ObjectStorePort, adapter_name: str):
        self.adapter = adapter
        self.adapter_name = adapter_name

    async def put(self, key: str, body: bytes, mime_type: str,
                  metadata: Optional[Dict[str, str]] = None) -> PutObjectResult:
        t0 = time.perf_counter()
        with _span("objectstore.put", key=key, size=len(body), adapter=self.adapter_name):
            try:
                res = await self.adapter.put(key, body, mime_type, metadata)
            except Exception:
                log.exception("objectstore.put err key=%s adapter=%s dur_ms=%s", key, self.adapter_name, _ms(t0))
                raise
        log.info("objectstore.put ok key=%s size=%s adapter=%s dur_ms=%s", key, res.size, self.adapter_name, _ms(t0))
        return res

    async def delete(self, key: str) -> None:
        t0 = time.perf_counter()
        with _span("objectstore.delete", key=key, adapter=self.adapter_name):
            try:
                await self.adapter.delete(key)
            except Exception:
                log.exception("objectstore.delete err key=%s adapter=%s", key, self.adapter_name)
                raise
        log.info("objectstore.delete ok key=%s dur_ms=%s", key, _ms(t0))

    async def get(self, key: str) -> bytes:
        with _span("objectstore.get", key=key, adapter=self.adapter_name):
            try:
                return await self.adapter.get(key)
            except Exception:
                log.exception("objectstore.get err key=%s adapter=%s", key, self.adapter_name)
                raise

    async def exists(self, key: str) -> bool:
        with _span("objectstore.exists", key=key, adapter=self.adapter_name):
            try:
                found = await self.adapter.exists(key)
            except Exception:
                log.exception("objectstore.exists err key=%s adapter=%s", key, self.adapter_name)
                raise
        log.debug("objectstore.exists key=%s found=%s", key, found)
        return found

    async def list(self, prefix: Optional[str] = None, max_keys: int = 1000) -> List[str]:
        with _span("objectstore.list", prefix=prefix, adapter=self.adapter_name):
            try:
                keys = await self.adapter.list(prefix, max_keys)
            except Exception:
                log.exception("objectstore.list err prefix=%s adapter=%s", prefix, self.adapter_name)
                raise
        log.info("objectstore.list ok prefix=%s count=%s", prefix, len(keys))
        return keys

    async def presigned_upload_url(self, key: str, options: Optional[PresignOptions] = None) -> str:
        with _span("objectstore.presign", key=key, op="upload", adapter=self.adapter_name):
            return await self.adapter.presigned_upload_url(key, options)

    async def presigned_download_url(self, key: str, expires_in: int = DEFAULT_PRESIGN_EXPIRES) -> str:
        with _span("objectstore.presign", key=key, op="download", adapter=self.adapter_name):
            return await self.adapter.presigned_download_url(key, expires_in)

    def public_url(self, key: str) -> str:
        return self.adapter.public_url(key)
