from __future__ import annotations

from fastapi import Depends, Header

from chiya.application.ports.repositories import UserRepository
from chiya.application.ports.security import PasswordHasher, TokenBlocklist, TokenService
from chiya.application.use_cases.session_tokens import AuthenticateAccessToken, Principal
from chiya.infrastructure.cache.redis_adapters import RedisTokenBlocklist
from chiya.infrastructure.db.repositories.user_repo import SqlAlchemyUserRepository
from chiya.infrastructure.security.passwords import BcryptPasswordHasher
from chiya.infrastructure.security.tokens import JwtTokenService

BEARER_PREFIX = "Bearer "


class AccessDeniedError(Exception):
    pass


class InsufficientPermissionsError(Exception):
    pass


def get_user_repository() -> UserRepository:
    return SqlAlchemyUserRepository()


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher()


def get_token_service() -> TokenService:
    return JwtTokenService()


def get_token_blocklist() -> TokenBlocklist:
    return RedisTokenBlocklist()


def get_current_principal(
    authorization: str | None = Header(default=None),
    user_repository: UserRepository = Depends(get_user_repository),
    token_service: TokenService = Depends(get_token_service),
    blocklist: TokenBlocklist = Depends(get_token_blocklist),
) -> Principal:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AccessDeniedError("Access denied. No token provided.")
    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise AccessDeniedError("Access denied. No token provided.")

    use_case = AuthenticateAccessToken(
        user_repository=user_repository,
        token_service=token_service,
        blocklist=blocklist,
    )
    return use_case.execute(token)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.user.is_admin:
        raise InsufficientPermissionsError("Insufficient permissions.")
    return principal
