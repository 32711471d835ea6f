from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from chiya.domain.common.ids import UserId


class UserRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


@dataclass(frozen=True)
class UserProfile:
    first_name: str
    last_name: str
    phone: str = ""
    position: str = ""
    avatar: str | None = None
    permissions: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.first_name.strip() or not self.last_name.strip():
            raise ValueError("profile must include first_name and last_name")


@dataclass(frozen=True)
class User:
    user_id: UserId
    username: str
    email: str
    password_hash: str
    role: UserRole
    profile: UserProfile
    is_active: bool
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None

    def __post_init__(self) -> None:
        if not 3 <= len(self.username) <= 50:
            raise ValueError("username must be between 3 and 50 characters")
        if "@" not in self.email or self.email.startswith("@") or self.email.endswith("@"):
            raise ValueError("email must be a valid address")
        if not self.password_hash:
            raise ValueError("password_hash must be non-empty")

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def logged_in(self, now: datetime) -> User:
        return replace(self, last_login=now, updated_at=now)

    def with_password_hash(self, password_hash: str, now: datetime) -> User:
        return replace(self, password_hash=password_hash, updated_at=now)

    def with_status(self, is_active: bool, now: datetime) -> User:
        return replace(self, is_active=is_active, updated_at=now)
