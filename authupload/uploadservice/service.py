from __future__ import annotations

import asyncio
import logging
import math
import uuid
from typing import List, Optional

from ..objectstorage import ObjectStorePort, PresignOptions
from .config import UploadSettings
from .contracts import (
    FileRecord,
    FileRepoPort,
    NewFileRecord,
    PaginatedFiles,
    PresignedUploadResponse,
    UploadedFile,
    UploadOptions,
)
from .errors import UploadErrorCodes, bad_request, file_not_found

log = logging.getLogger("authupload.upload")

PRESIGNED_UPLOAD_EXPIRES = 3600
DEFAULT_FOLDER = "uploads"


def file_extension(filename: str) -> str:
    """Everything from the last dot on, or '' when there is none."""
    idx = filename.rfind(".")
    return filename[idx:] if idx != -1 else ""


class UploadService:
    """
    Orchestrates: validate -> write object -> persist metadata.

    The object store is always written first and deleted first. A metadata
    write that fails after a successful object write leaves the object behind
    in the bucket; no compensating delete is attempted.
    """

    def __init__(
        self,
        store: ObjectStorePort,
        files: FileRepoPort,
        settings: Optional[UploadSettings] = None,
    ) -> None:
        self.store = store
        self.files = files
        self.settings = settings or UploadSettings()
        self.max_file_size = self.settings.MAX_FILE_SIZE
        self.allowed_mime_types = self.settings.allowed_mime_types()

    # ------------------------
    # Validation
    # ------------------------
    def _validate_file(self, file: UploadedFile) -> None:
        if not file.data:
            raise bad_request(UploadErrorCodes.EMPTY_FILE, "File is empty")
        if self.max_file_size and len(file.data) > self.max_file_size:
            limit_mb = self.max_file_size / 1024 / 1024
            raise bad_request(
                UploadErrorCodes.FILE_TOO_LARGE,
                f"File size exceeds maximum allowed size of {limit_mb:g}MB",
            )
        self._validate_mime_type(file.mime_type)

    def _validate_mime_type(self, mime_type: str) -> None:
        if mime_type not in self.allowed_mime_types:
            allowed = ", ".join(self.allowed_mime_types) or "none configured"
            raise bad_request(
                UploadErrorCodes.MIME_NOT_ALLOWED,
                f"File type {mime_type} is not allowed. Allowed types: {allowed}",
            )

    def _make_key(self, folder: Optional[str], filename: str) -> tuple[str, str]:
        folder = (folder or DEFAULT_FOLDER).strip("/") or DEFAULT_FOLDER
        if any(part in ("", ".", "..") for part in folder.split("/")):
            raise bad_request(UploadErrorCodes.INVALID_FOLDER, f"Invalid folder: {folder}")
        unique_name = f"{uuid.uuid4()}{file_extension(filename)}"
        return f"{folder}/{unique_name}", unique_name

    # ------------------------
    # API (used by routes)
    # ------------------------
    async def upload_file(self, file: UploadedFile, options: Optional[UploadOptions] = None) -> FileRecord:
        opts = options or UploadOptions()
        self._validate_file(file)
        key, unique_name = self._make_key(opts.folder, file.filename)

        stored = await self.store.put(key, file.data, file.mime_type, opts.metadata)
        try:
            record = await asyncio.to_thread(
                self.files.create,
                NewFileRecord(
                    filename=unique_name,
                    original_name=file.filename,
                    mime_type=file.mime_type,
                    size=len(file.data),
                    key=key,
                    url=stored.url,
                    uploaded_by=opts.uploaded_by,
                    metadata=dict(opts.metadata or {}),
                ),
            )
        except Exception:
            log.exception("upload.persist_failed key=%s orphaned_object=true", key)
            raise

        log.info("upload.stored file_id=%s key=%s size=%s", record.id, key, record.size)
        return record

    async def upload_files(self, files: List[UploadedFile], options: Optional[UploadOptions] = None) -> List[FileRecord]:
        """Each file is independent; records already written stay written if a sibling fails."""
        results = await asyncio.gather(
            *(self.upload_file(f, options) for f in files), return_exceptions=True
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            log.warning("upload.batch partial failed=%s ok=%s", len(failures), len(results) - len(failures))
            raise failures[0]
        return list(results)

    async def get_presigned_upload_url(self, filename: str, mime_type: str,
                                       folder: Optional[str] = None) -> PresignedUploadResponse:
        self._validate_mime_type(mime_type)
        key, _ = self._make_key(folder, filename)
        url = await self.store.presigned_upload_url(
            key, PresignOptions(expires_in=PRESIGNED_UPLOAD_EXPIRES, content_type=mime_type)
        )
        log.info("upload.presigned key=%s", key)
        return PresignedUploadResponse(url=url, key=key, expires_in=PRESIGNED_UPLOAD_EXPIRES)

    async def confirm_upload(self, key: str, original_name: str, mime_type: str, size: int,
                             uploaded_by: Optional[str] = None) -> FileRecord:
        if not await self.store.exists(key):
            raise bad_request(UploadErrorCodes.NOT_IN_STORAGE, "File not found in storage")

        record = await asyncio.to_thread(
            self.files.create,
            NewFileRecord(
                filename=key.rsplit("/", 1)[-1],
                original_name=original_name,
                mime_type=mime_type,
                size=size,
                key=key,
                url=self.store.public_url(key),
                uploaded_by=uploaded_by,
            ),
        )
        log.info("upload.confirmed file_id=%s key=%s", record.id, key)
        return record

    async def get_files(self, page: int = 1, limit: int = 20, uploaded_by: Optional[str] = None) -> PaginatedFiles:
        if page < 1 or limit < 1:
            raise bad_request(UploadErrorCodes.INVALID_PAGE, "page and limit must be positive integers")
        offset = (page - 1) * limit
        rows, total = await asyncio.gather(
            asyncio.to_thread(self.files.list, offset=offset, limit=limit, uploaded_by=uploaded_by),
            asyncio.to_thread(self.files.count, uploaded_by=uploaded_by),
        )
        return PaginatedFiles(files=rows, total=total, pages=math.ceil(total / limit))

    async def get_file(self, file_id: str) -> FileRecord:
        record = await asyncio.to_thread(self.files.get_by_id, file_id)
        if not record:
            raise file_not_found(f"File with ID {file_id} not found")
        return record

    async def get_file_by_key(self, key: str) -> FileRecord:
        record = await asyncio.to_thread(self.files.get_by_key, key)
        if not record:
            raise file_not_found(f"File with key {key} not found")
        return record

    async def delete_file(self, file_id: str) -> None:
        record = await self.get_file(file_id)
        # object first, then row
        await self.store.delete(record.key)
        try:
            await asyncio.to_thread(self.files.delete, file_id)
        except Exception:
            log.exception("upload.delete_record_failed file_id=%s key=%s", file_id, record.key)
            raise
        log.info("upload.deleted file_id=%s key=%s", file_id, record.key)
