from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from chiya.domain.common.ids import UserId


class InvalidTokenError(Exception):
    pass


class ExpiredTokenError(InvalidTokenError):
    pass


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenClaims:
    user_id: UserId
    token_id: str
    expires_at: datetime


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...

    def verify(self, password: str, password_hash: str) -> bool: ...


class TokenService(Protocol):
    def issue_pair(self, user_id: UserId) -> TokenPair: ...

    def decode_access(self, token: str) -> TokenClaims: ...

    def decode_refresh(self, token: str) -> TokenClaims: ...


class TokenBlocklist(Protocol):
    def revoke(self, token_id: str, ttl_seconds: int) -> None: ...

    def is_revoked(self, token_id: str) -> bool: ...
