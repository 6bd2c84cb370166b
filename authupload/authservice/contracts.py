from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

TokenType = Literal["access", "refresh"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Domain Models ----------

class UserRecord(BaseModel):
    """Stored user, including the password digest. Never leaves the service."""
    id: str
    email: str
    password_hash: str
    name: str
    timezone: str
    weight_kg: Optional[Decimal] = None
    created_at: datetime


class PublicUser(CamelModel):
    id: str
    email: str
    name: str
    timezone: str
    weight_kg: Optional[float] = None
    created_at: datetime

    @classmethod
    def from_record(cls, rec: UserRecord) -> "PublicUser":
        return cls(
            id=rec.id,
            email=rec.email,
            name=rec.name,
            timezone=rec.timezone,
            weight_kg=float(rec.weight_kg) if rec.weight_kg is not None else None,
            created_at=rec.created_at,
        )


class TokenClaims(BaseModel):
    sub: str
    email: str
    type: TokenType
    iat: int
    exp: int
    jti: Optional[str] = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    expires_in: int


class AuthResult(CamelModel):
    user: PublicUser
    tokens: TokenPair


class MeResponse(CamelModel):
    user: PublicUser


# ---------- Requests ----------

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=50)
    name: str = Field(..., min_length=2, max_length=100)
    timezone: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class RefreshRequest(CamelModel):
    refresh_token: str


# ---------- Ports ----------

class UserRepoPort(Protocol):
    """User persistence. Emails arrive already lower-cased."""
    def get_by_email(self, email: str) -> Optional[UserRecord]: ...
    def get_by_id(self, user_id: str) -> Optional[UserRecord]: ...
    def create(self, *, email: str, password_hash: str, name: str, timezone: str) -> UserRecord: ...


class TokenIssuerPort(Protocol):
    def issue_pair(self, subject_id: str, email: str) -> TokenPair: ...
    def verify(self, token: str) -> TokenClaims: ...


class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...


class AuthErrorCodes:
    BAD_CREDENTIALS = "BAD_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    WRONG_TOKEN_TYPE = "WRONG_TOKEN_TYPE"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    MISSING_TOKEN = "MISSING_TOKEN"
