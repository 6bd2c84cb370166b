from __future__ import annotations
from typing import Optional

from ..errors import ConflictError, UnauthorizedError


class InvalidTokenError(Exception):
    """Raised by the token issuer when a token fails signature, format or expiry checks."""


def make_auth_error(code: str, message: str, *, details: Optional[dict] = None) -> UnauthorizedError:
    return UnauthorizedError(message, code=code, details=details)


def make_conflict_error(code: str, message: str) -> ConflictError:
    return ConflictError(message, code=code)
