from __future__ import annotations
from typing import Optional

from .adapters.inmemory import InMemoryObjectStore
from .adapters.s3 import S3ObjectStore
from .config import ObjectStorageSettings
from .contracts import PresignOptions, PutObjectResult
from .errors import ObjectNotFound, ObjectStoreConfigError, ObjectStoreError
from .ports import ObjectStorePort
from .service import ObjectStoreClient


def make_object_store_from_env(cfg: Optional[ObjectStorageSettings] = None) -> ObjectStoreClient:
    cfg = cfg or ObjectStorageSettings()
    name = cfg.OBJECT_STORE_ADAPTER.lower()
    if name == "memory":
        adapter: ObjectStorePort = InMemoryObjectStore(
            bucket=cfg.R2_BUCKET_NAME or "local", public_base_url=cfg.R2_PUBLIC_URL
        )
    elif name == "s3":
        missing = [n for n in ("R2_BUCKET_NAME", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY") if not getattr(cfg, n)]
        if not cfg.endpoint_url():
            missing.append("R2_ACCOUNT_ID")
        if missing:
            raise ObjectStoreConfigError(f"S3 object store requires: {', '.join(missing)}")
        adapter = S3ObjectStore(
            cfg.R2_BUCKET_NAME,
            endpoint_url=cfg.endpoint_url(),
            region=cfg.R2_REGION,
            access_key_id=cfg.R2_ACCESS_KEY_ID,
            secret_access_key=cfg.R2_SECRET_ACCESS_KEY,
            public_base_url=cfg.R2_PUBLIC_URL,
        )
    else:
        raise ObjectStoreConfigError(f"Unknown OBJECT_STORE_ADAPTER: {cfg.OBJECT_STORE_ADAPTER}")
    return ObjectStoreClient(adapter, name)


__all__ = [
    "InMemoryObjectStore",
    "S3ObjectStore",
    "ObjectStorageSettings",
    "PresignOptions",
    "PutObjectResult",
    "ObjectNotFound",
    "ObjectStoreConfigError",
    "ObjectStoreError",
    "ObjectStorePort",
    "ObjectStoreClient",
    "make_object_store_from_env",
]
