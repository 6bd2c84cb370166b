from typing import Optional

from fastapi import Depends, Header

from .contracts import AuthErrorCodes, PublicUser
from .errors import make_auth_error
from .service import AuthService, get_auth_service


def get_authorization_header(authorization: Optional[str] = Header(default=None, alias="Authorization")) -> Optional[str]:
    """Raw Authorization header value (e.g. 'Bearer <token>')."""
    return authorization


def get_current_user(
    auth: AuthService = Depends(get_auth_service),
    authorization: Optional[str] = Depends(get_authorization_header),
) -> PublicUser:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise make_auth_error(AuthErrorCodes.MISSING_TOKEN, "Missing or invalid Authorization header")
    token = authorization.split(" ", 1)[1].strip()
    return auth.verify_access(token)
