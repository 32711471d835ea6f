from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from chiya.application.dto.requests import RefreshTokenRequest
from chiya.application.dto.responses import MessageResponse, RefreshResponse, TokensDataResponse
from chiya.application.mappers.user_mapper import to_tokens_response
from chiya.application.metrics.auth_activity import record_auth_event
from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import (
    InvalidTokenError,
    TokenBlocklist,
    TokenClaims,
    TokenService,
)
from chiya.domain.user.entities import User

logger = logging.getLogger(__name__)


class RefreshTokenRequiredError(Exception):
    pass


class InvalidRefreshTokenError(Exception):
    pass


class RevokedTokenError(InvalidTokenError):
    pass


class TokenUserNotFoundError(Exception):
    pass


class TokenUserDeactivatedError(Exception):
    pass


@dataclass(frozen=True)
class Principal:
    user: User
    claims: TokenClaims


class AuthenticateAccessToken:
    def __init__(
        self,
        user_repository: UserRepository,
        token_service: TokenService,
        blocklist: TokenBlocklist,
    ) -> None:
        self._user_repository = user_repository
        self._token_service = token_service
        self._blocklist = blocklist

    def execute(self, token: str) -> Principal:
        claims = self._token_service.decode_access(token)
        if self._blocklist.is_revoked(claims.token_id):
            raise RevokedTokenError("token has been revoked")

        user = self._user_repository.get(claims.user_id)
        if user is None:
            raise TokenUserNotFoundError("Invalid token. User not found.")
        if not user.is_active:
            raise TokenUserDeactivatedError("Account is deactivated.")
        return Principal(user=user, claims=claims)


class RefreshTokens:
    def __init__(self, user_repository: UserRepository, token_service: TokenService) -> None:
        self._user_repository = user_repository
        self._token_service = token_service

    def execute(self, request_dto: RefreshTokenRequest) -> RefreshResponse:
        if not request_dto.refresh_token:
            raise RefreshTokenRequiredError("Refresh token is required")

        try:
            claims = self._token_service.decode_refresh(request_dto.refresh_token)
        except InvalidTokenError as exc:
            raise InvalidRefreshTokenError("Invalid refresh token") from exc

        user = self._user_repository.get(claims.user_id)
        if user is None or not user.is_active:
            raise InvalidRefreshTokenError("Invalid refresh token")

        tokens = self._token_service.issue_pair(user.user_id)
        record_auth_event("token_refreshed")
        return RefreshResponse(
            message="Token refreshed successfully",
            data=TokensDataResponse(tokens=to_tokens_response(tokens)),
        )


class Logout:
    def __init__(self, blocklist: TokenBlocklist) -> None:
        self._blocklist = blocklist

    def execute(self, principal: Principal) -> MessageResponse:
        remaining = principal.claims.expires_at - datetime.now(timezone.utc)
        ttl_seconds = max(int(remaining.total_seconds()), 1)
        self._blocklist.revoke(principal.claims.token_id, ttl_seconds)

        record_auth_event("logout")
        logger.info(
            "user_logged_out",
            extra={"user_id": str(principal.user.user_id), "username": principal.user.username},
        )
        return MessageResponse(message="Logout successful")
