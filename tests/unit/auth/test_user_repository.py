from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy import create_engine, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from chiya.domain.common.ids import UserId
from chiya.domain.user.entities import User, UserProfile, UserRole
from chiya.infrastructure.db.models.user import Base, UserModel
from chiya.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from chiya.infrastructure.security.passwords import BcryptPasswordHasher
from chiya.tools.seed import seed_default_users

NOW = datetime(2026, 10, 16, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _user(user_id: str, username: str, email: str, created_at: datetime = NOW) -> User:
    return User(
        user_id=UserId(user_id),
        username=username,
        email=email,
        password_hash="hash",
        role=UserRole.MANAGER,
        profile=UserProfile(
            first_name="Ram",
            last_name="Bahadur",
            phone="+977-9800000000",
            permissions=("orders",),
        ),
        is_active=True,
        created_at=created_at,
        updated_at=created_at,
    )


def test_add_and_lookup_round_trip(engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine)
    repository.add(_user("u1", "ram", "ram@chiyashop.com"))

    by_id = repository.get(UserId("u1"))
    assert by_id is not None
    assert by_id.role == UserRole.MANAGER
    assert by_id.profile.permissions == ("orders",)
    assert by_id.created_at == NOW
    assert by_id.created_at.tzinfo is not None

    assert repository.find_by_login("ram") == by_id
    assert repository.find_by_login("ram@chiyashop.com") == by_id
    assert repository.find_by_email("ram@chiyashop.com") == by_id
    assert repository.find_by_username_or_email("someone", "ram@chiyashop.com") == by_id
    assert repository.find_by_login("nobody") is None


def test_profile_is_stored_with_camel_case_keys(engine: Engine) -> None:
    SqlAlchemyUserRepository(engine).add(_user("u1", "ram", "ram@chiyashop.com"))
    with Session(engine) as session:
        model = session.get(UserModel, "u1")
        assert model is not None
        assert model.profile["firstName"] == "Ram"
        assert model.profile["lastName"] == "Bahadur"


def test_update_persists_changes(engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine)
    user = _user("u1", "ram", "ram@chiyashop.com")
    repository.add(user)

    repository.update(replace(user.with_status(False, NOW), email="ram.b@chiyashop.com"))

    stored = repository.get(UserId("u1"))
    assert stored is not None
    assert stored.is_active is False
    assert stored.email == "ram.b@chiyashop.com"


def test_duplicate_username_violates_unique_constraint(engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine)
    repository.add(_user("u1", "ram", "ram@chiyashop.com"))
    with pytest.raises(IntegrityError):
        repository.add(_user("u2", "ram", "other@chiyashop.com"))


def test_list_page_newest_first_and_hides_deleted(engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine)
    for index in range(4):
        repository.add(
            _user(f"u{index}", f"user{index}", f"u{index}@x.io", NOW + timedelta(minutes=index))
        )
    with Session(engine) as session:
        session.execute(update(UserModel).where(UserModel.id == "u3").values(deleted_at=NOW))
        session.commit()

    users, total = repository.list_page(limit=2, offset=0)

    assert total == 3
    assert [user.username for user in users] == ["user2", "user1"]
    assert repository.get(UserId("u3")) is None


def test_seed_creates_default_users_once(engine: Engine) -> None:
    repository = SqlAlchemyUserRepository(engine)
    hasher = BcryptPasswordHasher(rounds=4)

    assert seed_default_users(repository, hasher) == 3
    assert seed_default_users(repository, hasher) == 0

    admin = repository.find_by_login("admin")
    assert admin is not None and admin.is_admin
    assert hasher.verify("admin123", admin.password_hash)
    staff = repository.find_by_login("staff1")
    assert staff is not None
    assert staff.role == UserRole.STAFF
    assert hasher.verify("chiya123", staff.password_hash)
