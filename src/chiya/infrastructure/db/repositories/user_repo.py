from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Engine, func, or_, select
from sqlalchemy.orm import Session

from chiya.application.ports.repositories import UserRepository
from chiya.domain.common.ids import UserId
from chiya.domain.user.entities import User, UserProfile, UserRole
from chiya.infrastructure.db.models.user import UserModel
from chiya.infrastructure.db.session import get_engine


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _profile_to_json(profile: UserProfile) -> dict[str, Any]:
    return {
        "firstName": profile.first_name,
        "lastName": profile.last_name,
        "phone": profile.phone,
        "position": profile.position,
        "avatar": profile.avatar,
        "permissions": list(profile.permissions),
    }


def _profile_from_json(data: dict[str, Any]) -> UserProfile:
    return UserProfile(
        first_name=data["firstName"],
        last_name=data["lastName"],
        phone=data.get("phone") or "",
        position=data.get("position") or "",
        avatar=data.get("avatar"),
        permissions=tuple(data.get("permissions") or ()),
    )


def _to_domain(model: UserModel) -> User:
    return User(
        user_id=UserId(model.id),
        username=model.username,
        email=model.email,
        password_hash=model.password_hash,
        role=UserRole(model.role),
        profile=_profile_from_json(model.profile),
        is_active=model.is_active,
        created_at=_as_utc(model.created_at),
        updated_at=_as_utc(model.updated_at),
        last_login=_as_utc(model.last_login),
    )


def _apply(model: UserModel, user: User) -> None:
    model.username = user.username
    model.email = user.email
    model.password_hash = user.password_hash
    model.role = user.role.value
    model.profile = _profile_to_json(user.profile)
    model.is_active = user.is_active
    model.last_login = user.last_login
    model.created_at = user.created_at
    model.updated_at = user.updated_at


class SqlAlchemyUserRepository(UserRepository):
    """Users table access. Soft-deleted rows are invisible to every query."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> User | None:
        return self._first(UserModel.id == str(user_id))

    def find_by_login(self, identifier: str) -> User | None:
        return self._first(or_(UserModel.username == identifier, UserModel.email == identifier))

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        return self._first(or_(UserModel.username == username, UserModel.email == email))

    def find_by_email(self, email: str) -> User | None:
        return self._first(UserModel.email == email)

    def add(self, user: User) -> None:
        model = UserModel(id=str(user.user_id))
        _apply(model, user)
        with Session(self._engine) as session:
            session.add(model)
            session.commit()

    def update(self, user: User) -> None:
        with Session(self._engine) as session:
            model = session.get(UserModel, str(user.user_id))
            if model is None or model.deleted_at is not None:
                raise LookupError(f"user {user.user_id} not found")
            _apply(model, user)
            session.commit()

    def list_page(self, limit: int, offset: int) -> tuple[list[User], int]:
        active_rows = UserModel.deleted_at.is_(None)
        statement = (
            select(UserModel)
            .where(active_rows)
            .order_by(UserModel.created_at.desc(), UserModel.id)
            .limit(limit)
            .offset(offset)
        )
        count_statement = select(func.count()).select_from(UserModel).where(active_rows)

        with Session(self._engine) as session:
            models = session.execute(statement).scalars().all()
            total = session.execute(count_statement).scalar_one()
            users = [_to_domain(model) for model in models]

        return users, int(total)

    def _first(self, condition: Any) -> User | None:
        statement = (
            select(UserModel)
            .where(condition, UserModel.deleted_at.is_(None))
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
            if model is None:
                return None
            return _to_domain(model)
