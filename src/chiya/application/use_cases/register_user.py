from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from chiya.application.dto.requests import RegisterRequest
from chiya.application.dto.responses import AuthDataResponse, AuthResponse
from chiya.application.mappers.user_mapper import to_tokens_response, to_user_response
from chiya.application.metrics.auth_activity import record_auth_event
from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher, TokenService
from chiya.domain.common.ids import UserId
from chiya.domain.user.entities import User, UserProfile

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    pass


class RegisterUser:
    def __init__(
        self,
        user_repository: UserRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher
        self._token_service = token_service

    def execute(self, request_dto: RegisterRequest) -> AuthResponse:
        existing = self._user_repository.find_by_username_or_email(
            username=request_dto.username,
            email=request_dto.email,
        )
        if existing is not None:
            raise UserAlreadyExistsError("User with this email or username already exists")

        now = datetime.now(timezone.utc)
        profile = request_dto.profile
        user = User(
            user_id=UserId(str(uuid4())),
            username=request_dto.username,
            email=request_dto.email,
            password_hash=self._password_hasher.hash(request_dto.password),
            role=request_dto.role,
            profile=UserProfile(
                first_name=profile.first_name,
                last_name=profile.last_name,
                phone=profile.phone,
                position=profile.position,
                avatar=profile.avatar,
                permissions=tuple(profile.permissions),
            ),
            is_active=True,
            created_at=now,
            updated_at=now,
            last_login=now,
        )
        self._user_repository.add(user)
        tokens = self._token_service.issue_pair(user.user_id)

        record_auth_event("register")
        logger.info("user_registered", extra={"user_id": str(user.user_id), "username": user.username})
        return AuthResponse(
            message="User registered successfully",
            data=AuthDataResponse(user=to_user_response(user), tokens=to_tokens_response(tokens)),
        )
