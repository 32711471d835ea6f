from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from chiya.domain.user.entities import UserRole

# bcrypt only looks at the first 72 bytes of a password.
PASSWORD_MAX_LENGTH = 72


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class ProfileRequest(CamelBaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: str = ""
    position: str = ""
    avatar: str | None = None
    permissions: list[str] = Field(default_factory=list)


class ProfileUpdateRequest(CamelBaseModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    phone: str | None = None
    position: str | None = None
    avatar: str | None = None
    permissions: list[str] | None = None


class RegisterRequest(CamelBaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=6, max_length=PASSWORD_MAX_LENGTH)
    role: UserRole = UserRole.STAFF
    profile: ProfileRequest


class LoginRequest(CamelBaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UpdateProfileRequest(CamelBaseModel):
    email: str | None = Field(default=None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    profile: ProfileUpdateRequest | None = None


class ChangePasswordRequest(CamelBaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6, max_length=PASSWORD_MAX_LENGTH)


class RefreshTokenRequest(CamelBaseModel):
    refresh_token: str | None = None


class UpdateUserStatusRequest(CamelBaseModel):
    is_active: bool
