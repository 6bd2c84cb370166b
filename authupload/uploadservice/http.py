from __future__ import annotations

import uuid
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request, Response, status
from starlette.datastructures import UploadFile

from .contracts import (
    ConfirmUploadRequest,
    FileRecord,
    PaginatedFiles,
    PresignedUploadRequest,
    PresignedUploadResponse,
    UploadedFile,
    UploadOptions,
)
from .errors import UploadErrorCodes, bad_request
from .service import UploadService

# ---- Dependency shim (the app factory installs the real service) ----
_service_singleton: Optional[UploadService] = None


def set_upload_service(svc: UploadService) -> None:
    global _service_singleton
    _service_singleton = svc


def get_upload_service() -> UploadService:
    if _service_singleton is None:
        raise RuntimeError("UploadService is not configured; call set_upload_service() first")
    return _service_singleton


async def _read_multipart(request: Request, field: str) -> Tuple[List[UploadedFile], Optional[str]]:
    """Collect the file parts named `field` plus the optional 'folder' text field."""
    form = await request.form()
    files: List[UploadedFile] = []
    folder: Optional[str] = None
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            if name != field:
                continue
            data = await value.read()
            files.append(UploadedFile(
                filename=value.filename or "",
                mime_type=value.content_type or "application/octet-stream",
                data=data,
            ))
        elif name == "folder" and value:
            folder = value
    return files, folder


# ---- Router ----
router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=FileRecord, status_code=status.HTTP_201_CREATED)
async def upload_file(request: Request, svc: UploadService = Depends(get_upload_service)):
    files, folder = await _read_multipart(request, "file")
    if not files:
        raise bad_request(UploadErrorCodes.NO_FILE, "No file uploaded")
    return await svc.upload_file(files[0], UploadOptions(folder=folder or "uploads"))


@router.post("/multiple", response_model=List[FileRecord], status_code=status.HTTP_201_CREATED)
async def upload_files(request: Request, svc: UploadService = Depends(get_upload_service)):
    files, folder = await _read_multipart(request, "files")
    if not files:
        raise bad_request(UploadErrorCodes.NO_FILE, "No files uploaded")
    return await svc.upload_files(files, UploadOptions(folder=folder or "uploads"))


@router.post("/presigned", response_model=PresignedUploadResponse)
async def presigned(req: PresignedUploadRequest, svc: UploadService = Depends(get_upload_service)):
    return await svc.get_presigned_upload_url(req.filename, req.mime_type, req.folder)


@router.post("/confirm", response_model=FileRecord, status_code=status.HTTP_201_CREATED)
async def confirm(req: ConfirmUploadRequest, svc: UploadService = Depends(get_upload_service)):
    return await svc.confirm_upload(req.key, req.original_name, req.mime_type, req.size, req.uploaded_by)


@router.get("", response_model=PaginatedFiles)
async def list_files(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    uploaded_by: Optional[str] = Query(None, alias="uploadedBy"),
    svc: UploadService = Depends(get_upload_service),
):
    return await svc.get_files(page, limit, uploaded_by)


@router.get("/{file_id}", response_model=FileRecord)
async def get_file(file_id: uuid.UUID, svc: UploadService = Depends(get_upload_service)):
    return await svc.get_file(str(file_id))


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_file(file_id: uuid.UUID, svc: UploadService = Depends(get_upload_service)):
    await svc.delete_file(str(file_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
