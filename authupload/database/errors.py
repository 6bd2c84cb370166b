from __future__ import annotations

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from ..errors import ConflictError, InternalError, NotFoundError, ServiceError, ValidationError


def translate_db_error(exc: SQLAlchemyError) -> ServiceError:
    """Map storage-engine failures onto the service error taxonomy."""
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
        if "unique" in detail or "duplicate" in detail:
            return ConflictError("Unique constraint violation", code="unique_violation")
        if "foreign key" in detail:
            return ValidationError("Foreign key constraint failed", code="foreign_key_violation")
        return ValidationError("Invalid data provided", code="integrity_error")
    if isinstance(exc, NoResultFound):
        return NotFoundError("Record not found")
    return InternalError("Database error", code="database_error")
