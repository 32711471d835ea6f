from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import inspect

from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher
from chiya.domain.common.ids import UserId
from chiya.domain.user.entities import User, UserProfile, UserRole
from chiya.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from chiya.infrastructure.db.session import get_engine
from chiya.infrastructure.observability.logging_config import configure_logging
from chiya.infrastructure.security.passwords import BcryptPasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_USERS = (
    {
        "username": "admin",
        "email": "admin@chiyashop.com",
        "password": "admin123",
        "role": UserRole.ADMIN,
        "profile": UserProfile(
            first_name="Admin",
            last_name="User",
            phone="+977-9876543210",
            position="Administrator",
            permissions=("all",),
        ),
    },
    {
        "username": "chiya_admin",
        "email": "chiya@chiyashop.com",
        "password": "chiya123",
        "role": UserRole.ADMIN,
        "profile": UserProfile(
            first_name="Chiya",
            last_name="Admin",
            phone="+977-9876543211",
            position="Manager",
            permissions=("all",),
        ),
    },
    {
        "username": "staff1",
        "email": "staff@chiyashop.com",
        "password": "chiya123",
        "role": UserRole.STAFF,
        "profile": UserProfile(
            first_name="Staff",
            last_name="Member",
            phone="+977-9876543212",
            position="Waiter",
            permissions=("orders", "tables"),
        ),
    },
)


def seed_default_users(user_repository: UserRepository, password_hasher: PasswordHasher) -> int:
    """Create the default accounts unless ``admin`` already exists. Returns how many were added."""
    if user_repository.find_by_login("admin") is not None:
        logger.info("seed_skipped", extra={"detail": "admin user already exists"})
        return 0

    now = datetime.now(timezone.utc)
    for account in DEFAULT_USERS:
        user_repository.add(
            User(
                user_id=UserId(str(uuid4())),
                username=account["username"],
                email=account["email"],
                password_hash=password_hasher.hash(account["password"]),
                role=account["role"],
                profile=account["profile"],
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("seed_user_created", extra={"username": account["username"]})
    return len(DEFAULT_USERS)


def main() -> None:
    configure_logging()
    engine = get_engine(timeout_seconds=2.0)
    if "users" not in set(inspect(engine).get_table_names()):
        print("no schema yet")
        return

    created = seed_default_users(SqlAlchemyUserRepository(engine), BcryptPasswordHasher())
    print(f"seeded {created} users")


if __name__ == "__main__":
    main()
