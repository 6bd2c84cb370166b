from .config import UploadSettings
from .contracts import FileRecord, PaginatedFiles, UploadedFile, UploadOptions
from .repository import InMemoryFileRepo
from .service import UploadService
from .http import router as upload_router, set_upload_service, get_upload_service

__all__ = [
    "UploadSettings",
    "FileRecord",
    "PaginatedFiles",
    "UploadedFile",
    "UploadOptions",
    "InMemoryFileRepo",
    "UploadService",
    "upload_router",
    "set_upload_service",
    "get_upload_service",
]
