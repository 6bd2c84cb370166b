from __future__ import annotations
import asyncio
from typing import Any, Dict, List, Optional

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import ClientError

from ..contracts import DEFAULT_PRESIGN_EXPIRES, PresignOptions, PutObjectResult
from ..errors import ObjectNotFound
from ..ports import ObjectStorePort

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


def _is_missing(e: ClientError) -> bool:
    status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    code = str(e.response.get("Error", {}).get("Code", ""))
    return status == 404 or code in _MISSING_CODES


class S3ObjectStore(ObjectStorePort):
    """S3-compatible bucket client (Cloudflare R2 by default)."""

    def __init__(self, bucket: str, *, endpoint_url: Optional[str] = None, region: str = "auto",
                 access_key_id: Optional[str] = None, secret_access_key: Optional[str] = None,
                 public_base_url: Optional[str] = None, client: Any = None):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.s3 = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    async def put(self, key: str, body: bytes, mime_type: str,
                  metadata: Optional[Dict[str, str]] = None) -> PutObjectResult:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket, "Key": key, "Body": body, "ContentType": mime_type}
        if metadata:
            kwargs["Metadata"] = {str(k): str(v) for k, v in metadata.items()}
        await asyncio.to_thread(lambda: self.s3.put_object(**kwargs))
        return PutObjectResult(key=key, url=self.public_url(key), size=len(body), mime_type=mime_type)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(lambda: self.s3.delete_object(Bucket=self.bucket, Key=key))

    async def get(self, key: str) -> bytes:
        def read():
            obj = self.s3.get_object(Bucket=self.bucket, Key=key)
            return obj["Body"].read()

        try:
            return await asyncio.to_thread(read)
        except ClientError as e:
            if _is_missing(e):
                raise ObjectNotFound(f"object not found: {key}") from e
            raise

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(lambda: self.s3.head_object(Bucket=self.bucket, Key=key))
        except ClientError as e:
            if _is_missing(e):
                return False
            raise
        return True

    async def list(self, prefix: Optional[str] = None, max_keys: int = 1000) -> List[str]:
        kwargs: Dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": max_keys}
        if prefix:
            kwargs["Prefix"] = prefix
        resp = await asyncio.to_thread(lambda: self.s3.list_objects_v2(**kwargs))
        return [c["Key"] for c in resp.get("Contents", []) or [] if c.get("Key")]

    # Presigning is a local HMAC computation; no request reaches the bucket.
    async def presigned_upload_url(self, key: str, options: Optional[PresignOptions] = None) -> str:
        opts = options or PresignOptions()
        params: Dict[str, Any] = {"Bucket": self.bucket, "Key": key}
        if opts.content_type:
            params["ContentType"] = opts.content_type
        return self.s3.generate_presigned_url(ClientMethod="put_object", Params=params, ExpiresIn=opts.expires_in)

    async def presigned_download_url(self, key: str, expires_in: int = DEFAULT_PRESIGN_EXPIRES) -> str:
        return self.s3.generate_presigned_url(
            ClientMethod="get_object", Params={"Bucket": self.bucket, "Key": key}, ExpiresIn=expires_in
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.r2.cloudflarestorage.com/{key}"
