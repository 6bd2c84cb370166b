from __future__ import annotations
import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass
class AuthConfig:
    secret: str = field(default_factory=lambda: _env("JWT_SECRET", ""))
    alg: str = field(default_factory=lambda: _env("JWT_ALGORITHM", "HS256"))
    access_expiry: str = field(default_factory=lambda: _env("JWT_ACCESS_EXPIRY", "15m"))
    refresh_expiry: str = field(default_factory=lambda: _env("JWT_REFRESH_EXPIRY", "7d"))
    bcrypt_rounds: int = field(default_factory=lambda: int(_env("BCRYPT_ROUNDS", "12")))
    default_timezone: str = "America/Sao_Paulo"
