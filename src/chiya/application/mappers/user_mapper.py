from __future__ import annotations

from chiya.application.dto.responses import TokensResponse, UserProfileResponse, UserResponse
from chiya.application.ports.security import TokenPair
from chiya.domain.user.entities import User


def to_user_response(user: User) -> UserResponse:
    profile = user.profile
    return UserResponse(
        id=str(user.user_id),
        username=user.username,
        email=user.email,
        role=user.role.value,
        profile=UserProfileResponse(
            firstName=profile.first_name,
            lastName=profile.last_name,
            phone=profile.phone,
            position=profile.position,
            avatar=profile.avatar,
            permissions=list(profile.permissions),
        ),
        isActive=user.is_active,
        lastLogin=user.last_login,
        createdAt=user.created_at,
        updatedAt=user.updated_at,
    )


def to_tokens_response(tokens: TokenPair) -> TokensResponse:
    return TokensResponse(accessToken=tokens.access_token, refreshToken=tokens.refresh_token)
