from __future__ import annotations
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base for errors raised by domain services.

    Each subclass pins the HTTP status and reason label the boundary layer uses
    when it renders the error; services themselves never touch HTTP.
    """
    type: str = "INTERNAL"
    code: str = "internal_error"
    message: str = "Internal server error"
    error: str = "Internal Server Error"
    status_code: int = 500

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    type = "VALIDATION"
    code = "validation_error"
    message = "Validation error"
    error = "Bad Request"
    status_code = 400


class UnauthorizedError(ServiceError):
    type = "AUTH_ERROR"
    code = "unauthorized"
    message = "Unauthorized"
    error = "Unauthorized"
    status_code = 401


class NotFoundError(ServiceError):
    type = "NOT_FOUND"
    code = "not_found"
    message = "Resource not found"
    error = "Not Found"
    status_code = 404


class ConflictError(ServiceError):
    type = "CONFLICT"
    code = "conflict"
    message = "Resource already exists"
    error = "Conflict"
    status_code = 409


class InternalError(ServiceError):
    pass


class ConfigurationError(RuntimeError):
    """Fatal startup misconfiguration. Never mapped to a response."""
