from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

from chiya.application.dto.requests import UpdateUserStatusRequest
from chiya.application.dto.responses import (
    PaginationResponse,
    UserDataResponse,
    UserEnvelopeResponse,
    UsersPageDataResponse,
    UsersPageResponse,
)
from chiya.application.mappers.user_mapper import to_user_response
from chiya.application.ports.repositories import UserRepository
from chiya.application.use_cases.user_profile import UserNotFoundError
from chiya.domain.common.ids import UserId

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class ListUsers:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, page: int | None, limit: int | None) -> UsersPageResponse:
        page = page if page and page > 0 else DEFAULT_PAGE
        limit = limit if limit and limit > 0 else DEFAULT_LIMIT

        users, total = self._user_repository.list_page(limit=limit, offset=(page - 1) * limit)
        total_pages = math.ceil(total / limit)
        return UsersPageResponse(
            data=UsersPageDataResponse(
                users=[to_user_response(user) for user in users],
                pagination=PaginationResponse(
                    currentPage=page,
                    totalPages=total_pages,
                    totalUsers=total,
                    hasNext=page < total_pages,
                    hasPrev=page > 1,
                ),
            )
        )


class UpdateUserStatus:
    def __init__(self, user_repository: UserRepository) -> None:
        self._user_repository = user_repository

    def execute(self, user_id: UserId, request_dto: UpdateUserStatusRequest) -> UserEnvelopeResponse:
        user = self._user_repository.get(user_id)
        if user is None:
            raise UserNotFoundError("User not found")

        updated = user.with_status(request_dto.is_active, datetime.now(timezone.utc))
        self._user_repository.update(updated)

        logger.info(
            "user_status_updated",
            extra={"user_id": str(updated.user_id), "username": updated.username},
        )
        verb = "activated" if updated.is_active else "deactivated"
        return UserEnvelopeResponse(
            message=f"User {verb} successfully",
            data=UserDataResponse(user=to_user_response(updated)),
        )
