from __future__ import annotations

import logging
from datetime import datetime, timezone

from chiya.application.dto.requests import LoginRequest
from chiya.application.dto.responses import AuthDataResponse, AuthResponse
from chiya.application.mappers.user_mapper import to_tokens_response, to_user_response
from chiya.application.metrics.auth_activity import record_auth_event
from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)


class InvalidCredentialsError(Exception):
    pass


class AccountDeactivatedError(Exception):
    pass


class LoginUser:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._token_service = token_service

    def execute(self, request_dto: LoginRequest) -> AuthResponse:
        # The login field accepts either a username or an email address.
        user = self._user_repository.find_by_login(request_dto.username)
        if user is None:
            record_auth_event("login_failed")
            raise InvalidCredentialsError("Invalid credentials")
        if not user.is_active:
            record_auth_event("login_rejected_inactive")
            raise AccountDeactivatedError("Account is deactivated. Please contact administrator.")
        if not self._password_hasher.verify(request_dto.password, user.password_hash):
            record_auth_event("login_failed")
            raise InvalidCredentialsError("Invalid credentials")

        logged_in = user.logged_in(datetime.now(timezone.utc))
        self._user_repository.update(logged_in)
        tokens = self._token_service.issue_pair(logged_in.user_id)

        record_auth_event("login")
        logger.info(
            "user_logged_in",
            extra={"user_id": str(logged_in.user_id), "username": logged_in.username},
        )
        return AuthResponse(
            message="Login successful",
            data=AuthDataResponse(
                user=to_user_response(logged_in),
                tokens=to_tokens_response(tokens),
            ),
        )
