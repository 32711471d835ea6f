from __future__ import annotations

import os
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt

from chiya.application.ports.security import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenClaims,
    TokenPair,
    TokenService,
)
from chiya.domain.common.ids import UserId

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(days=7)
REFRESH_TOKEN_TTL = timedelta(days=30)
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _secret(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} is not set")
    return value


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JwtTokenService(TokenService):
    """HS256 access/refresh pairs signed with separate secrets."""

    def __init__(
        self,
        access_secret: str | None = None,
        refresh_secret: str | None = None,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._access_secret = access_secret or _secret("JWT_SECRET")
        self._refresh_secret = refresh_secret or _secret("JWT_REFRESH_SECRET")
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock

    def issue_pair(self, user_id: UserId) -> TokenPair:
        now = self._clock()
        return TokenPair(
            access_token=self._encode(user_id, ACCESS_TOKEN_TYPE, now + self._access_ttl, now),
            refresh_token=self._encode(user_id, REFRESH_TOKEN_TYPE, now + self._refresh_ttl, now),
        )

    def decode_access(self, token: str) -> TokenClaims:
        return self._decode(token, self._access_secret, ACCESS_TOKEN_TYPE)

    def decode_refresh(self, token: str) -> TokenClaims:
        return self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)

    def _encode(self, user_id: UserId, token_type: str, expires_at: datetime, now: datetime) -> str:
        secret = self._access_secret if token_type == ACCESS_TOKEN_TYPE else self._refresh_secret
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "type": token_type,
            "jti": secrets.token_urlsafe(16),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def _decode(self, token: str, secret: str, expected_type: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("token has expired") from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError("token is invalid") from exc

        if payload.get("type") != expected_type:
            raise InvalidTokenError(f"expected a {expected_type} token")

        return TokenClaims(
            user_id=UserId(str(payload["sub"])),
            token_id=str(payload["jti"]),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), timezone.utc),
        )
