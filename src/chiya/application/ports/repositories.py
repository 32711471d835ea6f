from __future__ import annotations

from typing import Protocol

from chiya.domain.common.ids import UserId
from chiya.domain.floor.state import FloorState
from chiya.domain.user.entities import User


class FloorStateRepository(Protocol):
    def load(self) -> FloorState: ...

    def save(self, state: FloorState) -> None: ...


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> User | None: ...

    def find_by_login(self, identifier: str) -> User | None: ...

    def find_by_username_or_email(self, username: str, email: str) -> User | None: ...

    def find_by_email(self, email: str) -> User | None: ...

    def add(self, user: User) -> None: ...

    def update(self, user: User) -> None: ...

    def list_page(self, limit: int, offset: int) -> tuple[list[User], int]: ...
