from __future__ import annotations
import logging
from typing import Optional

from .config import AuthConfig
from .contracts import (
    AuthErrorCodes, AuthResult, LoginRequest, PublicUser, RefreshRequest,
    RegisterRequest, TokenClaims, TokenIssuerPort, TokenPair, UserRecord, UserRepoPort,
)
from .crypto import CredentialHasher
from .errors import InvalidTokenError, make_auth_error, make_conflict_error

log = logging.getLogger("authupload.auth")

# Same message for unknown email and wrong password
_BAD_CREDENTIALS_MSG = "Invalid credentials"


class AuthService:
    """
    Registration, login, token refresh and profile lookup.

    Holds no per-user state; everything persistent goes through ``user_repo``.
    """

    def __init__(
        self,
        *,
        user_repo: UserRepoPort,
        issuer: TokenIssuerPort,
        hasher: Optional[CredentialHasher] = None,
        cfg: Optional[AuthConfig] = None,
    ):
        self.cfg = cfg or AuthConfig()
        self.user_repo = user_repo
        self.issuer = issuer
        self.hasher = hasher or CredentialHasher(rounds=self.cfg.bcrypt_rounds)

    # --------- Core operations ----------
    def register(self, req: RegisterRequest) -> AuthResult:
        email = str(req.email).lower()
        if self.user_repo.get_by_email(email):
            raise make_conflict_error(AuthErrorCodes.EMAIL_TAKEN, "Email already registered")

        user = self.user_repo.create(
            email=email,
            password_hash=self.hasher.hash(req.password),
            name=req.name,
            timezone=req.timezone or self.cfg.default_timezone,
        )
        log.info("auth.register user_id=%s", user.id)
        return AuthResult(user=PublicUser.from_record(user), tokens=self._issue_for_user(user))

    def login(self, req: LoginRequest) -> AuthResult:
        email = str(req.email).lower()
        user = self.user_repo.get_by_email(email)
        if not user:
            raise make_auth_error(AuthErrorCodes.BAD_CREDENTIALS, _BAD_CREDENTIALS_MSG)
        if not self.hasher.verify(req.password, user.password_hash):
            raise make_auth_error(AuthErrorCodes.BAD_CREDENTIALS, _BAD_CREDENTIALS_MSG)

        log.info("auth.login user_id=%s", user.id)
        return AuthResult(user=PublicUser.from_record(user), tokens=self._issue_for_user(user))

    def refresh(self, req: RefreshRequest) -> TokenPair:
        # Every failure collapses into one response so token internals never leak.
        try:
            claims = self.issuer.verify(req.refresh_token)
            if claims.type != "refresh":
                raise InvalidTokenError("Not a refresh token")
            user = self.user_repo.get_by_id(claims.sub)
            if not user:
                raise InvalidTokenError("Unknown user")
        except Exception as ex:
            log.warning("auth.refresh.rejected reason=%s", type(ex).__name__)
            raise make_auth_error(AuthErrorCodes.INVALID_TOKEN, "Invalid or expired token")

        # No revocation list: the presented refresh token stays valid until it expires.
        return self._issue_for_user(user)

    def get_profile(self, user_id: str) -> PublicUser:
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise make_auth_error(AuthErrorCodes.USER_NOT_FOUND, "User not found")
        return PublicUser.from_record(user)

    def verify_access(self, token: str) -> PublicUser:
        """Resolve an access token to its user; refresh tokens are rejected.

        Every rejection carries the same message; the reason only goes to the log.
        """
        try:
            claims: TokenClaims = self.issuer.verify(token)
        except InvalidTokenError as ex:
            log.warning("auth.access.rejected reason=%s", ex)
            raise make_auth_error(AuthErrorCodes.INVALID_TOKEN, "Unauthorized")
        if claims.type != "access":
            log.warning("auth.access.rejected reason=wrong token type sub=%s", claims.sub)
            raise make_auth_error(AuthErrorCodes.WRONG_TOKEN_TYPE, "Unauthorized")
        return self.get_profile(claims.sub)

    # --------- Helpers ----------
    def _issue_for_user(self, user: UserRecord) -> TokenPair:
        return self.issuer.issue_pair(user.id, user.email)


# Module-level instance wired by the application factory
_service_instance: Optional[AuthService] = None


def set_auth_service(svc: AuthService) -> None:
    global _service_instance
    _service_instance = svc


def get_auth_service() -> AuthService:
    if _service_instance is None:
        raise RuntimeError("AuthService is not configured; call set_auth_service() first")
    return _service_instance
