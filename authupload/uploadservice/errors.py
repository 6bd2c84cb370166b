from __future__ import annotations

from ..errors import NotFoundError, ValidationError


class UploadErrorCodes:
    EMPTY_FILE = "EMPTY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    MIME_NOT_ALLOWED = "MIME_NOT_ALLOWED"
    NO_FILE = "NO_FILE"
    NOT_IN_STORAGE = "NOT_IN_STORAGE"
    INVALID_FOLDER = "INVALID_FOLDER"
    INVALID_PAGE = "INVALID_PAGE"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"


def bad_request(code: str, message: str) -> ValidationError:
    return ValidationError(message, code=code)


def file_not_found(message: str) -> NotFoundError:
    return NotFoundError(message, code=UploadErrorCodes.FILE_NOT_FOUND)
