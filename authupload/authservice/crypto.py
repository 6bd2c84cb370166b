from __future__ import annotations
import re
import time
import uuid
from typing import Any, Dict, Optional

import bcrypt
import jwt
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError
from .config import AuthConfig
from .contracts import ClockPort, TokenClaims, TokenIssuerPort, TokenPair, TokenType
from .errors import InvalidTokenError

DEFAULT_ACCESS_TTL_SECONDS = 900
DEFAULT_REFRESH_TTL_SECONDS = 7 * 24 * 3600

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}

# bcrypt only looks at the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def parse_duration_seconds(value: str, default: int = DEFAULT_ACCESS_TTL_SECONDS) -> int:
    """Convert '<int><s|m|h|d>' into seconds; anything else yields ``default``."""
    match = _DURATION_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        return default
    return int(match.group(1)) * _UNIT_SECONDS[match.group(2)]


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


class CredentialHasher:
    """bcrypt wrapper. Every digest embeds its own random salt."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @staticmethod
    def _encode(plaintext: str) -> bytes:
        return plaintext.encode("utf-8")[:_BCRYPT_MAX_BYTES]

    def hash(self, plaintext: str) -> str:
        digest = bcrypt.hashpw(self._encode(plaintext), bcrypt.gensalt(rounds=self.rounds))
        return digest.decode("ascii")

    def verify(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(plaintext), digest.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError, AttributeError):
            return False


class TokenIssuer(TokenIssuerPort):
    """
    Signs and verifies stateless bearer tokens (HS256 JWT via PyJWT).

    verify() checks signature and expiry only. Callers decide whether an
    access or a refresh token is acceptable by inspecting ``claims.type``.
    """

    def __init__(self, cfg: Optional[AuthConfig] = None, clock: Optional[ClockPort] = None):
        self.cfg = cfg or AuthConfig()
        if not self.cfg.secret:
            raise ConfigurationError("JWT_SECRET is not configured")
        self._secret = self.cfg.secret
        self._alg = self.cfg.alg
        self.clock = clock or SystemClock()
        self.access_ttl_seconds = parse_duration_seconds(self.cfg.access_expiry, DEFAULT_ACCESS_TTL_SECONDS)
        self.refresh_ttl_seconds = parse_duration_seconds(self.cfg.refresh_expiry, DEFAULT_REFRESH_TTL_SECONDS)

    def _sign(self, subject_id: str, email: str, token_type: TokenType, ttl: int, now: int) -> str:
        claims = TokenClaims(
            sub=subject_id,
            email=email,
            type=token_type,
            iat=now,
            exp=now + ttl,
            jti=str(uuid.uuid4()),
        )
        return jwt.encode(claims.model_dump(), self._secret, algorithm=self._alg)

    def issue_pair(self, subject_id: str, email: str) -> TokenPair:
        now = self.clock.now_utc_ts()
        return TokenPair(
            access_token=self._sign(subject_id, email, "access", self.access_ttl_seconds, now),
            refresh_token=self._sign(subject_id, email, "refresh", self.refresh_ttl_seconds, now),
            expires_in=self.access_ttl_seconds,
        )

    def verify(self, token: str) -> TokenClaims:
        try:
            payload: Dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._alg],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as ex:
            raise InvalidTokenError("Token expired") from ex
        except jwt.PyJWTError as ex:
            raise InvalidTokenError(f"Invalid token: {ex}") from ex
        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as ex:
            raise InvalidTokenError("Malformed token claims") from ex
