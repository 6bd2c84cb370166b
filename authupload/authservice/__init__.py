from .service import AuthService, get_auth_service, set_auth_service
from .crypto import CredentialHasher, TokenIssuer, parse_duration_seconds
from .models import InMemoryUserRepo
from .config import AuthConfig
from .deps import get_current_user
from .routes import router as auth_router

__all__ = [
    "AuthService",
    "get_auth_service",
    "set_auth_service",
    "CredentialHasher",
    "TokenIssuer",
    "parse_duration_seconds",
    "InMemoryUserRepo",
    "AuthConfig",
    "get_current_user",
    "auth_router",
]
