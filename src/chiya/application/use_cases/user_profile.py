from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone

from chiya.application.dto.requests import ChangePasswordRequest, UpdateProfileRequest
from chiya.application.dto.responses import MessageResponse, UserDataResponse, UserEnvelopeResponse
from chiya.application.mappers.user_mapper import to_user_response
from chiya.application.metrics.auth_activity import record_auth_event
from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher
from chiya.domain.common.ids import UserId
from chiya.domain.user.entities import User

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    pass


class EmailTakenError(Exception):
    pass


class IncorrectPasswordError(Exception):
    pass


def _require_user(user_repository: UserRepository, user_id: UserId) -> User:
    user = user_repository.get(user_id)
    if user is None:
        raise UserNotFoundError("User not found")
    return user


class GetProfile:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, user_id: UserId) -> UserEnvelopeResponse:
        user = _require_user(self._user_repository, user_id)
        return UserEnvelopeResponse(data=UserDataResponse(user=to_user_response(user)))


class UpdateProfile:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, user_id: UserId, request_dto: UpdateProfileRequest) -> UserEnvelopeResponse:
        user = _require_user(self._user_repository, user_id)

        email = user.email
        if request_dto.email and request_dto.email != user.email:
            if self._user_repository.find_by_email(request_dto.email) is not None:
                raise EmailTakenError("Email is already taken")
            email = request_dto.email

        profile = user.profile
        if request_dto.profile is not None:
            changes = request_dto.profile.model_dump(exclude_none=True)
            if "permissions" in changes:
                changes["permissions"] = tuple(changes["permissions"])
            profile = replace(profile, **changes)

        updated = replace(user, email=email, profile=profile, updated_at=datetime.now(timezone.utc))
        self._user_repository.update(updated)

        logger.info(
            "user_profile_updated",
            extra={"user_id": str(updated.user_id), "username": updated.username},
        )
        return UserEnvelopeResponse(
            message="Profile updated successfully",
            data=UserDataResponse(user=to_user_response(updated)),
        )


class ChangePassword:
    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher) -> None:
        self._user_repository = user_repository
        self._password_hasher = password_hasher

    def execute(self, user_id: UserId, request_dto: ChangePasswordRequest) -> MessageResponse:
        user = _require_user(self._user_repository, user_id)
        if not self._password_hasher.verify(request_dto.current_password, user.password_hash):
            raise IncorrectPasswordError("Current password is incorrect")

        updated = user.with_password_hash(
            self._password_hasher.hash(request_dto.new_password),
            datetime.now(timezone.utc),
        )
        self._user_repository.update(updated)

        record_auth_event("password_changed")
        logger.info(
            "user_password_changed",
            extra={"user_id": str(updated.user_id), "username": updated.username},
        )
        return MessageResponse(message="Password changed successfully")
