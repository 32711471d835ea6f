from __future__ import annotations

import logging
import os

import bcrypt

from chiya.application.ports.security import PasswordHasher

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12


def _bcrypt_rounds() -> int:
    raw = os.getenv("BCRYPT_ROUNDS")
    if not raw:
        return DEFAULT_ROUNDS
    try:
        rounds = int(raw)
    except ValueError:
        return DEFAULT_ROUNDS
    # bcrypt accepts cost factors 4..31.
    return min(max(rounds, 4), 31)


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int | None = None) -> None:
        self._rounds = rounds if rounds is not None else _bcrypt_rounds()

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("password_hash_unreadable")
            return False
